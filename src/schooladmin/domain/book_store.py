"""Book store domain manager.

Owns the in-memory Book collection. It generates identifiers, stamps the
derived fields (``book_id``, ``time_clicked``, counters, ``date_added``) and
normalizes optional strings to the ``"unknown"`` sentinel. It knows nothing
about teachers or events; cross-entity rules live in
:class:`~schooladmin.domain.data_manager.DataManager`.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Iterable, Mapping

from ..errors import ValidationError
from ..models.book import EDITABLE_BOOK_FIELDS, UNKNOWN, Book, BookDraft, Subject
from ..models.teacher import DEFAULT_HONORIFICS, is_bare_honorific
from ..utils.identifiers import BookCodeSequence, Clock, epoch_millis, new_id, utc_now
from .changes import collect_changes, is_blank
from .subject_catalog import SubjectCatalog

LOGGER = logging.getLogger(__name__)

_SENTINEL_FIELDS: tuple[str, ...] = (
    "url",
    "image",
    "subject_name",
    "teacher_name",
    "grade",
    "book_type",
)


class BookStore:
    """Domain manager for the Book collection.

    Every read returns copies; callers never hold a reference into the stored
    collection.
    """

    __slots__ = ("_books", "_subjects", "_clock", "_id_factory", "_codes", "_honorifics")

    def __init__(
        self,
        books: Iterable[Book] = (),
        *,
        subjects: SubjectCatalog | None = None,
        clock: Clock | None = None,
        id_factory: Callable[[], str] | None = None,
        honorifics: tuple[str, ...] = DEFAULT_HONORIFICS,
    ) -> None:
        """Initialize the store.

        Args:
            books: Seed records, stored as given.
            subjects: Catalog exposed through :meth:`list_subjects`.
            clock: Source of the current UTC time.
            id_factory: Generator for opaque ids.
            honorifics: Teacher name prefixes; a bare prefix counts as unset.
        """
        self._books: list[Book] = [replace(book) for book in books]
        self._subjects = subjects or SubjectCatalog()
        self._clock: Clock = clock or utc_now
        self._id_factory = id_factory or new_id
        self._codes = BookCodeSequence.continuing(book.book_id for book in self._books)
        self._honorifics = honorifics

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_books(self) -> list[Book]:
        """Return a copy of every book in insertion order."""
        return [replace(book) for book in self._books]

    def list_subjects(self) -> list[Subject]:
        return self._subjects.list_subjects()

    def get_book(self, book_id: str) -> Book | None:
        index = self._index_of(book_id)
        return None if index is None else replace(self._books[index])

    def __len__(self) -> int:
        return len(self._books)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_book(self, draft: BookDraft | Mapping[str, Any]) -> Book:
        """Create a book from ``draft`` and append it.

        Returns:
            A copy of the stored book.

        Raises:
            ValidationError: If the title is blank.
        """
        values = self._normalize(collect_changes(draft, EDITABLE_BOOK_FIELDS, owner="BookStore.add_book"))
        self._require_title(values.get("title"))
        now = self._clock()
        book = Book(
            id=self._id_factory(),
            book_id=self._codes.next_code(),
            title=values["title"],
            url=values.get("url", UNKNOWN),
            image=values.get("image", UNKNOWN),
            subject_name=values.get("subject_name", UNKNOWN),
            teacher_name=values.get("teacher_name", UNKNOWN),
            grade=values.get("grade", UNKNOWN),
            book_type=values.get("book_type", UNKNOWN),
            time_clicked=epoch_millis(now),
            click_count=0,
            favorites_count=0,
            date_added=now.date().isoformat(),
        )
        self._books.append(book)
        LOGGER.debug("BookStore.add_book: id=%s, book_id=%s", book.id, book.book_id)
        return replace(book)

    def update_book(self, book_id: str, changes: BookDraft | Mapping[str, Any]) -> Book | None:
        """Merge ``changes`` over the book with id ``book_id``.

        ``id``, ``book_id``, ``date_added`` and the counters are always kept;
        ``time_clicked`` moves forward.

        Returns:
            A copy of the updated book, or None if no book has that id.

        Raises:
            ValidationError: If the merged title is blank.
        """
        index = self._index_of(book_id)
        if index is None:
            LOGGER.debug("BookStore.update_book: unknown id=%s", book_id)
            return None

        values = self._normalize(collect_changes(changes, EDITABLE_BOOK_FIELDS, owner="BookStore.update_book"))
        existing = self._books[index]
        if "title" in values:
            self._require_title(values["title"])

        updated = replace(
            existing,
            **values,
            time_clicked=self._next_timestamp(existing.time_clicked),
        )
        self._books[index] = updated
        LOGGER.debug("BookStore.update_book: id=%s, fields=%s", book_id, sorted(values))
        return replace(updated)

    def delete_book(self, book_id: str) -> bool:
        """Remove the book with id ``book_id``; return False if absent."""
        index = self._index_of(book_id)
        if index is None:
            LOGGER.debug("BookStore.delete_book: unknown id=%s", book_id)
            return False
        removed = self._books.pop(index)
        LOGGER.debug("BookStore.delete_book: id=%s, book_id=%s", removed.id, removed.book_id)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _index_of(self, book_id: str) -> int | None:
        for index, book in enumerate(self._books):
            if book.id == book_id:
                return index
        return None

    def _next_timestamp(self, previous: int) -> int:
        return max(epoch_millis(self._clock()), previous + 1)

    def _normalize(self, values: dict[str, Any]) -> dict[str, Any]:
        normalized: dict[str, Any] = {}
        for name, value in values.items():
            text = "" if value is None else str(value).strip()
            if name in _SENTINEL_FIELDS and not text:
                text = UNKNOWN
            if name == "teacher_name" and is_bare_honorific(text, self._honorifics):
                text = UNKNOWN
            normalized[name] = text
        return normalized

    @staticmethod
    def _require_title(title: Any) -> None:
        if is_blank(title):
            raise ValidationError(message="Book title must not be empty", field_name="title")


__all__ = ["BookStore"]
