"""Standardized error types for the admin data layer.

Lookups that find nothing are reported with ``None``/``False`` sentinels and
never raise. The classes below cover the two failure families that do raise:
malformed input (``ValidationError`` / ``NotFoundError``) and the business
rule guarding teacher deletion (``ConstraintViolation``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class ErrorCode:
    """Constants for machine-readable error codes."""

    VALIDATION_FAILED = "validation_failed"
    SUBJECT_NOT_FOUND = "subject_not_found"
    NOT_FOUND = "not_found"
    TEACHER_HAS_BOOKS = "teacher_has_books"
    DUPLICATE_SCHEDULED_DATE = "duplicate_scheduled_date"
    CONSTRAINT_VIOLATION = "constraint_violation"


@dataclass
class AdminError(Exception):
    """Base exception for all errors raised by the stores.

    Attributes:
        error_code: Machine-readable error identifier.
        message: Human-readable error description.
        details: Additional structured error information.
    """

    error_code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary for UI or CLI reporting."""
        result: dict[str, Any] = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = dict(self.details)
        return result

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationError(AdminError):
    """Raised when input is malformed or violates a field rule."""

    error_code: str = field(default=ErrorCode.VALIDATION_FAILED)
    message: str = field(default="Invalid input")
    details: dict[str, Any] = field(default_factory=dict)

    field_name: str | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field_name is not None:
            result["field"] = self.field_name
        return result


@dataclass
class NotFoundError(ValidationError, LookupError):
    """Raised when input references an entity that does not exist."""

    error_code: str = field(default=ErrorCode.NOT_FOUND)
    message: str = field(default="Referenced record was not found")
    details: dict[str, Any] = field(default_factory=dict)
    field_name: str | None = field(default=None)

    reference: str | None = field(default=None)

    @classmethod
    def subject(cls, subject_id: str) -> "NotFoundError":
        """Build the error raised for an unresolvable subject id."""
        return cls(
            error_code=ErrorCode.SUBJECT_NOT_FOUND,
            message=f"Subject not found: {subject_id!r}",
            field_name="subject_id",
            reference=subject_id,
        )


@dataclass
class ConstraintViolation(AdminError):
    """Raised when a mutation would break a cross-record rule.

    ``blocking_count`` holds the number of records preventing the mutation.
    """

    error_code: str = field(default=ErrorCode.CONSTRAINT_VIOLATION)
    message: str = field(default="Operation violates a data constraint")
    details: dict[str, Any] = field(default_factory=dict)

    blocking_count: int = field(default=0)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["blocking_count"] = self.blocking_count
        return result

    @classmethod
    def teacher_has_books(cls, teacher_name: str, count: int) -> "ConstraintViolation":
        noun = "book" if count == 1 else "books"
        verb = "references" if count == 1 else "reference"
        return cls(
            error_code=ErrorCode.TEACHER_HAS_BOOKS,
            message=(
                f"Cannot delete teacher {teacher_name!r} because {count} {noun} "
                f"still {verb} them"
            ),
            details={"teacher_name": teacher_name},
            blocking_count=count,
        )

    @classmethod
    def duplicate_date(cls, scheduled_date: str, existing_id: str) -> "ConstraintViolation":
        return cls(
            error_code=ErrorCode.DUPLICATE_SCHEDULED_DATE,
            message=f"A speech is already scheduled for {scheduled_date}",
            details={"scheduled_date": scheduled_date, "existing_id": existing_id},
            blocking_count=1,
        )


__all__ = [
    "AdminError",
    "ConstraintViolation",
    "ErrorCode",
    "NotFoundError",
    "ValidationError",
]
