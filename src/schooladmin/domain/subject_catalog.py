"""Read-only subject catalog."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from ..errors import NotFoundError
from ..models.book import Subject

LOGGER = logging.getLogger(__name__)


class SubjectCatalog:
    """Lookup list of subjects seeded once at startup.

    Subjects are never created, edited or deleted through the stores; the
    catalog only answers lookups.
    """

    __slots__ = ("_subjects", "_by_id")

    def __init__(self, subjects: Iterable[Subject] = ()) -> None:
        self._subjects: tuple[Subject, ...] = tuple(subjects)
        self._by_id: dict[str, Subject] = {}
        for subject in self._subjects:
            if subject.id in self._by_id:
                raise ValueError(f"Duplicate subject id {subject.id!r}")
            self._by_id[subject.id] = subject
        LOGGER.debug("SubjectCatalog initialized with %d subject(s)", len(self._subjects))

    def list_subjects(self) -> list[Subject]:
        """Return a fresh list of every subject in catalog order."""
        return list(self._subjects)

    def get(self, subject_id: str) -> Subject | None:
        return self._by_id.get(subject_id)

    def require(self, subject_id: str) -> Subject:
        """Return the subject for ``subject_id``.

        Raises:
            NotFoundError: If no subject has that id.
        """
        subject = self._by_id.get(subject_id)
        if subject is None:
            LOGGER.debug("SubjectCatalog.require: unknown subject_id=%s", subject_id)
            raise NotFoundError.subject(subject_id)
        return subject

    def __contains__(self, subject_id: object) -> bool:
        return subject_id in self._by_id

    def __iter__(self) -> Iterator[Subject]:
        return iter(self._subjects)

    def __len__(self) -> int:
        return len(self._subjects)


__all__ = ["SubjectCatalog"]
