"""Daily speech records (one scheduled announcement per calendar date)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal, Mapping

SPEECH_STATUSES: tuple[str, ...] = ("scheduled", "published")
SpeechStatus = Literal["scheduled", "published"]
DEFAULT_SPEECH_STATUS = "scheduled"


@dataclass(slots=True)
class SpeechDraft:
    title: str
    content: str
    scheduled_date: str
    status: str = DEFAULT_SPEECH_STATUS

    @classmethod
    def from_wire(cls, payload: Mapping[str, Any]) -> "SpeechDraft":
        return cls(
            title=str(payload.get("title") or ""),
            content=str(payload.get("content") or ""),
            scheduled_date=str(payload.get("scheduledDate") or ""),
            status=str(payload.get("status") or DEFAULT_SPEECH_STATUS),
        )


@dataclass(slots=True)
class Speech:
    id: str
    title: str
    content: str
    scheduled_date: str
    status: str = DEFAULT_SPEECH_STATUS
    created_at: datetime | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "scheduledDate": self.scheduled_date,
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


__all__ = [
    "DEFAULT_SPEECH_STATUS",
    "SPEECH_STATUSES",
    "Speech",
    "SpeechDraft",
    "SpeechStatus",
]
