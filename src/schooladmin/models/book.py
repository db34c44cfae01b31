"""Book and subject records.

Books carry denormalized display names (``subject_name``, ``teacher_name``)
rather than foreign keys. Optional string fields never hold an empty string;
they fall back to the :data:`UNKNOWN` sentinel.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Literal, Mapping

UNKNOWN = "unknown"

GRADES: tuple[str, ...] = (
    "Grade 6",
    "Grade 7",
    "Grade 8",
    "Grade 9",
    "Grade 10",
    "Grade 11",
    "Grade 12",
)
BOOK_TYPES: tuple[str, ...] = ("book", "booklet")
BookType = Literal["book", "booklet"]

# Python attribute -> wire (JSON) key
_BOOK_WIRE_KEYS: dict[str, str] = {
    "id": "id",
    "book_id": "bookId",
    "title": "title",
    "url": "url",
    "image": "image",
    "subject_name": "subjectName",
    "teacher_name": "teacherName",
    "grade": "grade",
    "book_type": "bookType",
    "time_clicked": "timeClicked",
    "click_count": "clickCount",
    "favorites_count": "favoritesCount",
    "date_added": "dateAdded",
}


@dataclass(slots=True, frozen=True)
class Subject:
    """Read-only subject reference data."""

    id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(slots=True)
class BookDraft:
    """Caller-supplied book fields; the store derives everything else."""

    title: str
    url: str = UNKNOWN
    image: str = UNKNOWN
    subject_name: str = UNKNOWN
    teacher_name: str = UNKNOWN
    grade: str = UNKNOWN
    book_type: str = UNKNOWN

    @classmethod
    def from_wire(cls, payload: Mapping[str, Any]) -> "BookDraft":
        """Build a draft from an imported camelCase record."""
        values: dict[str, Any] = {}
        for name in EDITABLE_BOOK_FIELDS:
            value = payload.get(_BOOK_WIRE_KEYS[name])
            if value is not None:
                values[name] = str(value)
        values.setdefault("title", "")
        return cls(**values)


EDITABLE_BOOK_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(BookDraft))


@dataclass(slots=True)
class Book:
    """A catalogued book or booklet.

    Attributes:
        id: Opaque unique identifier.
        book_id: Sequential display code such as ``BOOK-007``.
        time_clicked: Epoch milliseconds of the latest creation or edit.
        date_added: ISO calendar date set once at creation.
    """

    id: str
    book_id: str
    title: str
    url: str
    image: str
    subject_name: str
    teacher_name: str
    grade: str
    book_type: str
    time_clicked: int
    click_count: int = 0
    favorites_count: int = 0
    date_added: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase representation used for export."""
        return {wire: getattr(self, name) for name, wire in _BOOK_WIRE_KEYS.items()}


__all__ = [
    "BOOK_TYPES",
    "Book",
    "BookDraft",
    "BookType",
    "EDITABLE_BOOK_FIELDS",
    "GRADES",
    "Subject",
    "UNKNOWN",
]
