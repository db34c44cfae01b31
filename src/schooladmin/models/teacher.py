"""Teacher records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

DEFAULT_HONORIFICS: tuple[str, ...] = ("Mr.", "Ms.", "Mrs.", "Dr.")
MIN_NAME_CHARS = 2


@dataclass(slots=True)
class TeacherDraft:
    """Fields a caller supplies when creating or editing a teacher."""

    name: str
    subject_id: str

    @classmethod
    def from_wire(cls, payload: Mapping[str, Any]) -> "TeacherDraft":
        return cls(
            name=str(payload.get("name") or ""),
            subject_id=str(payload.get("subjectId") or ""),
        )


@dataclass(slots=True)
class Teacher:
    """A teacher record.

    ``subject`` is the display name of ``subject_id`` and is always resolved by
    the store from the subject catalog.
    """

    id: str
    name: str
    subject: str
    subject_id: str
    date_added: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "subject": self.subject,
            "subjectId": self.subject_id,
            "dateAdded": self.date_added,
        }


def has_honorific(name: str, honorifics: tuple[str, ...] = DEFAULT_HONORIFICS) -> bool:
    """Return True when ``name`` is an honorific, a space, then a real name."""

    for token in honorifics:
        prefix = f"{token} "
        if name.startswith(prefix) and len(name[len(prefix):].strip()) >= MIN_NAME_CHARS:
            return True
    return False


def is_bare_honorific(name: str, honorifics: tuple[str, ...] = DEFAULT_HONORIFICS) -> bool:
    """Return True when ``name`` holds nothing but an honorific token."""

    return name.strip() in honorifics


__all__ = [
    "DEFAULT_HONORIFICS",
    "MIN_NAME_CHARS",
    "Teacher",
    "TeacherDraft",
    "has_honorific",
    "is_bare_honorific",
]
