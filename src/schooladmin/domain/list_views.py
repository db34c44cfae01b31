"""Search and sort helpers behind the generic book/teacher/speech list view."""

from __future__ import annotations

from typing import Any, Callable, Sequence, TypeVar

from ..models.book import Book
from ..models.speech import Speech
from ..models.teacher import Teacher

T = TypeVar("T")

RECORD_KINDS: tuple[str, ...] = ("books", "teachers", "speeches")
SORT_ORDERS: tuple[str, ...] = ("asc", "desc")

# kind -> sort key name -> attribute; "" is the fallback key
_SORT_ATTRIBUTES: dict[str, dict[str, str]] = {
    "books": {
        "title": "title",
        "subject": "subject_name",
        "teacher": "teacher_name",
        "grade": "grade",
        "clickCount": "click_count",
        "": "date_added",
    },
    "teachers": {
        "name": "name",
        "subject": "subject",
        "": "date_added",
    },
    "speeches": {
        "title": "title",
        "scheduledDate": "scheduled_date",
        "status": "status",
        "": "created_at",
    },
}


def sort_keys(kind: str) -> tuple[str, ...]:
    """Return the sort key names a list of ``kind`` offers, default last."""
    attributes = _attributes_for(kind)
    named = tuple(name for name in attributes if name)
    default = {"books": "dateAdded", "teachers": "dateAdded", "speeches": "createdAt"}[kind]
    return named + (default,)


def search_records(kind: str, records: Sequence[T], term: str) -> list[T]:
    """Keep the records whose searchable text contains ``term`` (case-insensitive)."""
    _attributes_for(kind)
    if not term:
        return list(records)
    matcher = _MATCHERS[kind]
    lowered = term.lower()
    return [record for record in records if matcher(record, term, lowered)]


def sort_records(
    kind: str,
    records: Sequence[T],
    sort_by: str | None = None,
    order: str = "desc",
) -> list[T]:
    """Sort ``records`` by a named key; unknown keys fall back to the date key.

    Strings compare case-insensitively, numbers numerically. The sort is
    stable in both directions.
    """
    if order not in SORT_ORDERS:
        raise ValueError(f"Sort order must be one of {SORT_ORDERS}, got {order!r}")
    attributes = _attributes_for(kind)
    attribute = attributes.get(sort_by or "", attributes[""])
    return sorted(records, key=lambda record: _comparable(getattr(record, attribute)), reverse=order == "desc")


def list_view(
    kind: str,
    records: Sequence[T],
    *,
    search: str = "",
    sort_by: str | None = None,
    order: str = "desc",
) -> list[T]:
    """Apply search then sort, as the list view shows (and exports) them."""
    return sort_records(kind, search_records(kind, records, search), sort_by, order)


def _attributes_for(kind: str) -> dict[str, str]:
    try:
        return _SORT_ATTRIBUTES[kind]
    except KeyError:
        raise ValueError(f"Unknown record kind {kind!r}; expected one of {RECORD_KINDS}") from None


def _comparable(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.casefold()
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def _book_matches(book: Book, term: str, lowered: str) -> bool:
    return any(
        lowered in text.lower()
        for text in (book.title, book.subject_name, book.teacher_name, book.grade)
    )


def _teacher_matches(teacher: Teacher, term: str, lowered: str) -> bool:
    return lowered in teacher.name.lower() or lowered in teacher.subject.lower()


def _speech_matches(speech: Speech, term: str, lowered: str) -> bool:
    return (
        lowered in speech.title.lower()
        or lowered in speech.content.lower()
        or term in speech.scheduled_date
    )


_MATCHERS: dict[str, Callable[[Any, str, str], bool]] = {
    "books": _book_matches,
    "teachers": _teacher_matches,
    "speeches": _speech_matches,
}


__all__ = [
    "RECORD_KINDS",
    "SORT_ORDERS",
    "list_view",
    "search_records",
    "sort_keys",
    "sort_records",
]
