"""Daily speech store.

Holds at most one speech per calendar date. It is independent of the data
manager: no events are published for speech changes.
"""

from __future__ import annotations

import calendar
import logging
import re
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Iterable, Mapping

from ..errors import ConstraintViolation, ValidationError
from ..models.speech import SPEECH_STATUSES, Speech, SpeechDraft
from ..utils.identifiers import Clock, new_id, utc_now
from .changes import collect_changes, is_blank

LOGGER = logging.getLogger(__name__)

_EDITABLE_FIELDS: tuple[str, ...] = ("title", "content", "scheduled_date", "status")
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_calendar_date(value: str) -> date | None:
    """Return the date for a ``YYYY-MM-DD`` string, or None if it is not one."""

    if not _DATE_PATTERN.match(value or ""):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


class SpeechStore:
    """Domain manager for daily speeches."""

    __slots__ = ("_speeches", "_clock", "_id_factory")

    def __init__(
        self,
        speeches: Iterable[Speech] = (),
        *,
        clock: Clock | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._speeches: list[Speech] = [replace(speech) for speech in speeches]
        self._clock: Clock = clock or utc_now
        self._id_factory = id_factory or new_id

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_speeches(self) -> list[Speech]:
        return [replace(speech) for speech in self._speeches]

    def get_speech(self, speech_id: str) -> Speech | None:
        index = self._index_of(speech_id)
        return None if index is None else replace(self._speeches[index])

    def find_by_date(self, scheduled_date: str) -> Speech | None:
        for speech in self._speeches:
            if speech.scheduled_date == scheduled_date:
                return replace(speech)
        return None

    def speeches_for_month(self, year: int, month: int) -> dict[int, Speech]:
        """Map day-of-month to the speech scheduled on that day.

        Raises:
            ValueError: If ``month`` is not in 1..12.
        """
        if not 1 <= month <= 12:
            raise ValueError(f"month must be in 1..12, got {month}")
        _, days = calendar.monthrange(year, month)
        by_day: dict[int, Speech] = {}
        for day in range(1, days + 1):
            speech = self.find_by_date(date(year, month, day).isoformat())
            if speech is not None:
                by_day[day] = speech
        return by_day

    def search(self, term: str) -> list[Speech]:
        """Case-insensitive match on title or content; substring match on the date."""
        if not term:
            return self.list_speeches()
        lowered = term.lower()
        return [
            replace(speech)
            for speech in self._speeches
            if lowered in speech.title.lower()
            or lowered in speech.content.lower()
            or term in speech.scheduled_date
        ]

    def __len__(self) -> int:
        return len(self._speeches)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_speech(self, draft: SpeechDraft | Mapping[str, Any]) -> Speech:
        """Schedule a new speech.

        Raises:
            ValidationError: If a field is blank or malformed.
            ConstraintViolation: If another speech already holds the date.
        """
        values = collect_changes(draft, _EDITABLE_FIELDS, owner="SpeechStore.add_speech")
        values.setdefault("status", "scheduled")
        self._validate(values)
        self._require_free_date(values["scheduled_date"], exclude_id=None)
        speech = Speech(
            id=self._id_factory(),
            title=str(values["title"]).strip(),
            content=str(values["content"]).strip(),
            scheduled_date=values["scheduled_date"],
            status=values["status"],
            created_at=self._clock(),
        )
        self._speeches.append(speech)
        LOGGER.debug("SpeechStore.add_speech: id=%s, date=%s", speech.id, speech.scheduled_date)
        return replace(speech)

    def update_speech(self, speech_id: str, changes: SpeechDraft | Mapping[str, Any]) -> Speech | None:
        index = self._index_of(speech_id)
        if index is None:
            LOGGER.debug("SpeechStore.update_speech: unknown id=%s", speech_id)
            return None

        existing = self._speeches[index]
        values = collect_changes(changes, _EDITABLE_FIELDS, owner="SpeechStore.update_speech")
        merged = {
            "title": values.get("title", existing.title),
            "content": values.get("content", existing.content),
            "scheduled_date": values.get("scheduled_date", existing.scheduled_date),
            "status": values.get("status", existing.status),
        }
        self._validate(merged)
        self._require_free_date(merged["scheduled_date"], exclude_id=speech_id)
        updated = replace(
            existing,
            title=str(merged["title"]).strip(),
            content=str(merged["content"]).strip(),
            scheduled_date=merged["scheduled_date"],
            status=merged["status"],
        )
        self._speeches[index] = updated
        LOGGER.debug("SpeechStore.update_speech: id=%s, fields=%s", speech_id, sorted(values))
        return replace(updated)

    def delete_speech(self, speech_id: str) -> bool:
        index = self._index_of(speech_id)
        if index is None:
            LOGGER.debug("SpeechStore.delete_speech: unknown id=%s", speech_id)
            return False
        self._speeches.pop(index)
        LOGGER.debug("SpeechStore.delete_speech: id=%s", speech_id)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _index_of(self, speech_id: str) -> int | None:
        for index, speech in enumerate(self._speeches):
            if speech.id == speech_id:
                return index
        return None

    def _require_free_date(self, scheduled_date: str, *, exclude_id: str | None) -> None:
        for speech in self._speeches:
            if speech.scheduled_date == scheduled_date and speech.id != exclude_id:
                LOGGER.info("Refusing second speech for %s (held by id=%s)", scheduled_date, speech.id)
                raise ConstraintViolation.duplicate_date(scheduled_date, speech.id)

    @staticmethod
    def _validate(values: Mapping[str, Any]) -> None:
        for name in ("title", "content"):
            if is_blank(values.get(name)):
                raise ValidationError(message=f"Speech {name} must not be empty", field_name=name)
        scheduled = str(values.get("scheduled_date") or "")
        if parse_calendar_date(scheduled) is None:
            raise ValidationError(
                message=f"Scheduled date must be a real date in YYYY-MM-DD form, got {scheduled!r}",
                field_name="scheduled_date",
            )
        status = values.get("status")
        if status not in SPEECH_STATUSES:
            raise ValidationError(
                message=f"Speech status must be one of {', '.join(SPEECH_STATUSES)}, got {status!r}",
                field_name="status",
            )


__all__ = ["SpeechStore", "parse_calendar_date"]
