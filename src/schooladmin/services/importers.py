"""JSON import validation and record admission for books, teachers and speeches.

Validation happens in two passes. JSON Schema checks each item's structure
(required keys, string types, non-blank values, enum membership, the date
pattern); a Python pass then checks what a schema cannot express well (URL
syntax, real calendar dates, subject references). Every error is a string of
the form ``Item N: ...`` naming the offending field.

Admission is a separate step: :class:`RecordImporter` feeds an already valid
result through the normal store operations one record at a time.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence
from urllib.parse import urlsplit

import jsonschema

from ..domain.data_manager import DataManager
from ..domain.speech_store import SpeechStore, parse_calendar_date
from ..domain.subject_catalog import SubjectCatalog
from ..errors import AdminError, ValidationError
from ..models.book import BOOK_TYPES, GRADES, BookDraft
from ..models.speech import SPEECH_STATUSES, SpeechDraft
from ..models.teacher import TeacherDraft
from ..utils.file_io import read_text

LOGGER = logging.getLogger(__name__)

KIND_BOOKS = "books"
KIND_TEACHERS = "teachers"
KIND_SPEECHES = "speeches"
IMPORT_KINDS: tuple[str, ...] = (KIND_BOOKS, KIND_TEACHERS, KIND_SPEECHES)

MAX_REPORTED_ERRORS = 50

_NON_BLANK = {"type": "string", "pattern": r"\S"}
_OPTIONAL_STRING = {"type": ["string", "null"]}
_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
_URL_FIELDS: tuple[str, ...] = ("url", "image")
_HOSTNAME_PATTERN = re.compile(r"^[a-zA-Z0-9-]+(\.[a-zA-Z0-9-]+)*\.?$")
_DOMAIN_PATTERN = re.compile(r"^([a-zA-Z0-9-]+\.)+[a-zA-Z]{2,}(/.*)?$")
_SCHEME_PREFIX = re.compile(r"^(https?://)?(www\.)?")

ITEM_SCHEMAS: dict[str, dict[str, Any]] = {
    KIND_BOOKS: {
        "type": "object",
        "required": ["title", "subjectName", "teacherName", "grade", "bookType"],
        "properties": {
            "title": _NON_BLANK,
            "subjectName": _NON_BLANK,
            "teacherName": _NON_BLANK,
            "grade": {"type": "string", "enum": list(GRADES)},
            "bookType": {"type": "string", "enum": list(BOOK_TYPES)},
            "url": _OPTIONAL_STRING,
            "image": _OPTIONAL_STRING,
        },
    },
    KIND_TEACHERS: {
        "type": "object",
        "required": ["name", "subjectId"],
        "properties": {
            "name": _NON_BLANK,
            "subjectId": _NON_BLANK,
        },
    },
    KIND_SPEECHES: {
        "type": "object",
        "required": ["title", "content", "scheduledDate"],
        "properties": {
            "title": _NON_BLANK,
            "content": _NON_BLANK,
            "scheduledDate": {"type": "string", "pattern": _DATE_PATTERN},
            "status": {"type": ["string", "null"], "enum": [*SPEECH_STATUSES, None]},
        },
    },
}

_EXAMPLES: dict[str, dict[str, str]] = {
    KIND_BOOKS: {
        "title": "Mathematics Textbook",
        "url": "https://example.com/math-book.pdf",
        "image": "https://example.com/math-cover.jpg",
        "subjectName": "Math",
        "teacherName": "Mr. Ahmed Mohammed",
        "grade": "Grade 9",
        "bookType": "book",
    },
    KIND_TEACHERS: {
        "name": "Ms. Fatima Ahmed",
        "subjectId": "1",
    },
    KIND_SPEECHES: {
        "title": "Morning address",
        "content": "Today is a new day for learning and progress...",
        "scheduledDate": "2024-01-15",
        "status": "scheduled",
    },
}


class DuplicateJSONKeyError(ValueError):
    """Raised when a duplicate key is encountered during JSON parsing."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Duplicate key '{key}' found in JSON object.")
        self.key = key


@dataclass(slots=True)
class ValidationResult:
    """Outcome of :func:`validate_import`.

    ``data`` holds the parsed items only when ``is_valid`` is True.
    """

    kind: str
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    data: list[dict[str, Any]] | None = None


@dataclass(slots=True)
class ImportFailure:
    index: int
    message: str


@dataclass(slots=True)
class ImportReport:
    """Per-record outcome of an admission run."""

    kind: str
    admitted: list[Any] = field(default_factory=list)
    failures: list[ImportFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        text = f"Imported {len(self.admitted)} {self.kind}"
        if self.failures:
            text += f", {len(self.failures)} failed"
        return text


def validate_import(
    text: str,
    kind: str,
    *,
    subjects: SubjectCatalog | None = None,
) -> ValidationResult:
    """Validate a JSON array of ``kind`` records.

    Args:
        text: Raw JSON text.
        kind: One of :data:`IMPORT_KINDS`.
        subjects: When given, teacher items must reference a subject in it.

    Raises:
        ValueError: If ``kind`` is not a known import kind.
    """
    _require_kind(kind)
    try:
        parsed = json.loads(text or "", object_pairs_hook=_reject_duplicate_keys)
    except DuplicateJSONKeyError as exc:
        return _invalid(kind, str(exc))
    except JSONDecodeError as exc:
        return _invalid(kind, f"Invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})")

    if not isinstance(parsed, list):
        return _invalid(kind, "Data must be a JSON array of records")
    if not parsed:
        return _invalid(kind, "The list is empty")

    validator = jsonschema.Draft202012Validator(ITEM_SCHEMAS[kind])
    errors: list[str] = []
    for index, item in enumerate(parsed, start=1):
        errors.extend(_schema_errors(validator, item, index))
        if isinstance(item, Mapping):
            errors.extend(_semantic_errors(kind, item, index, subjects))
        if len(errors) >= MAX_REPORTED_ERRORS:
            errors = errors[:MAX_REPORTED_ERRORS]
            errors.append("Too many validation errors; stopping early.")
            break

    if errors:
        LOGGER.debug("Import of %s rejected with %d error(s)", kind, len(errors))
        return ValidationResult(kind=kind, is_valid=False, errors=errors)
    return ValidationResult(kind=kind, is_valid=True, errors=[], data=list(parsed))


def validate_import_file(
    path: Path | str,
    kind: str,
    *,
    subjects: SubjectCatalog | None = None,
) -> ValidationResult:
    """Read ``path`` and validate its contents as ``kind`` records."""
    return validate_import(read_text(path), kind, subjects=subjects)


def is_valid_url(value: str) -> bool:
    """Accept full http(s) URLs, scheme-less hosts and bare domains with a path."""
    candidate = value if value.startswith(("http://", "https://")) else f"https://{value}"
    try:
        parts = urlsplit(candidate)
        parts.port  # raises ValueError for a malformed port
        host = parts.hostname or ""
        if _HOSTNAME_PATTERN.match(host) and not any(char.isspace() for char in candidate):
            return True
    except ValueError:
        pass
    return bool(_DOMAIN_PATTERN.match(_SCHEME_PREFIX.sub("", value, count=1)))


def example_payload(kind: str) -> list[dict[str, str]]:
    """Return a one-record example array for ``kind``."""
    _require_kind(kind)
    return [dict(_EXAMPLES[kind])]


def example_filename(kind: str) -> str:
    _require_kind(kind)
    return f"{kind}-example.json"


class RecordImporter:
    """Admits validated records into the stores one at a time.

    There is no transaction: a record that fails admission is reported and
    the remaining records are still attempted.
    """

    def __init__(self, data_manager: DataManager, speeches: SpeechStore) -> None:
        self._data_manager = data_manager
        self._speeches = speeches

    def admit(self, result: ValidationResult) -> ImportReport:
        """Add every record in ``result``.

        Raises:
            ValidationError: If ``result`` is not valid.
        """
        if not result.is_valid or result.data is None:
            raise ValidationError(
                message=f"Refusing to import {result.kind}: validation reported {len(result.errors)} error(s)",
                details={"errors": list(result.errors)},
            )

        report = ImportReport(kind=result.kind)
        for index, item in enumerate(result.data, start=1):
            try:
                report.admitted.append(self._admit_one(result.kind, item))
            except AdminError as exc:
                LOGGER.warning("Import of %s item %d failed: %s", result.kind, index, exc)
                report.failures.append(ImportFailure(index=index, message=f"Item {index}: {exc.message}"))
        LOGGER.info("%s", report.summary())
        return report

    def _admit_one(self, kind: str, item: Mapping[str, Any]) -> Any:
        if kind == KIND_BOOKS:
            return self._data_manager.add_book(BookDraft.from_wire(item))
        if kind == KIND_TEACHERS:
            return self._data_manager.add_teacher(TeacherDraft.from_wire(item))
        return self._speeches.add_speech(SpeechDraft.from_wire(item))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _require_kind(kind: str) -> None:
    if kind not in IMPORT_KINDS:
        raise ValueError(f"Unknown import kind {kind!r}; expected one of {', '.join(IMPORT_KINDS)}")


def _invalid(kind: str, message: str) -> ValidationResult:
    return ValidationResult(kind=kind, is_valid=False, errors=[message])


def _reject_duplicate_keys(pairs: Iterable[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise DuplicateJSONKeyError(key)
        result[key] = value
    return result


def _schema_errors(validator: jsonschema.Draft202012Validator, item: Any, index: int) -> list[str]:
    issues = sorted(validator.iter_errors(item), key=lambda issue: (list(map(str, issue.path)), issue.validator))
    messages: list[str] = []
    required_reported = False
    for issue in issues:
        # jsonschema yields one "required" error per missing key
        if issue.validator == "required":
            if not required_reported:
                missing: Sequence[str] = [key for key in issue.validator_value if key not in issue.instance]
                messages.extend(f'Item {index}: field "{key}" is required' for key in missing)
                required_reported = True
            continue
        messages.append(_describe(issue, index))
    return messages


def _describe(issue: jsonschema.ValidationError, index: int) -> str:
    prefix = f"Item {index}"
    if not issue.path:
        return f"{prefix}: must be a JSON object"

    name = str(issue.path[-1])
    if issue.validator == "type":
        return f'{prefix}: field "{name}" must be a string'
    if issue.validator == "enum":
        allowed = ", ".join(str(value) for value in issue.validator_value if value is not None)
        return f'{prefix}: field "{name}" has invalid value "{issue.instance}" (expected one of {allowed})'
    if issue.validator == "pattern" and issue.validator_value == _DATE_PATTERN:
        return f'{prefix}: field "{name}" must use the YYYY-MM-DD format'
    if issue.validator == "pattern":
        return f'{prefix}: field "{name}" must not be empty'
    return f'{prefix}: field "{name}": {issue.message}'


def _semantic_errors(
    kind: str,
    item: Mapping[str, Any],
    index: int,
    subjects: SubjectCatalog | None,
) -> list[str]:
    messages: list[str] = []
    if kind == KIND_BOOKS:
        for name in _URL_FIELDS:
            value = item.get(name)
            if isinstance(value, str) and value and not is_valid_url(value):
                messages.append(f'Item {index}: field "{name}" is not a valid URL')
    elif kind == KIND_SPEECHES:
        value = item.get("scheduledDate")
        if isinstance(value, str) and re.match(_DATE_PATTERN, value) and parse_calendar_date(value) is None:
            messages.append(f'Item {index}: field "scheduledDate" is not a real calendar date')
    elif kind == KIND_TEACHERS and subjects is not None:
        value = item.get("subjectId")
        if isinstance(value, str) and value.strip() and value not in subjects:
            messages.append(f'Item {index}: field "subjectId" references unknown subject "{value}"')
    return messages


__all__ = [
    "DuplicateJSONKeyError",
    "IMPORT_KINDS",
    "ITEM_SCHEMAS",
    "ImportFailure",
    "ImportReport",
    "KIND_BOOKS",
    "KIND_SPEECHES",
    "KIND_TEACHERS",
    "RecordImporter",
    "ValidationResult",
    "example_filename",
    "example_payload",
    "is_valid_url",
    "validate_import",
    "validate_import_file",
]
