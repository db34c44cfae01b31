"""Alert data models used by the alert manager.

These dataclasses mirror what the alert screen edits: the stored
:class:`Alert`, the :class:`AlertForm` a user fills in, the view-state
:class:`AlertFilter` and the aggregated :class:`AlertStats`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Literal

ALERT_TYPES: tuple[str, ...] = ("info", "warning", "error", "success")
ALERT_PRIORITIES: tuple[str, ...] = ("low", "medium", "high", "urgent")
ALERT_STATUSES: tuple[str, ...] = ("draft", "scheduled", "active", "expired", "archived")
TARGET_AUDIENCES: tuple[str, ...] = ("all", "students", "teachers", "parents", "staff")
ALERT_CATEGORIES: tuple[str, ...] = (
    "general",
    "academic",
    "administrative",
    "emergency",
    "maintenance",
)

AlertType = Literal["info", "warning", "error", "success"]
AlertPriority = Literal["low", "medium", "high", "urgent"]
AlertStatus = Literal["draft", "scheduled", "active", "expired", "archived"]
SortOrder = Literal["asc", "desc"]


@dataclass(slots=True, frozen=True)
class AlertAttachment:
    """Metadata describing a file attached to an alert.

    Attributes:
        id: Synthetic identifier (``attachment-<ms>-<random>``).
        name: File name shown to users.
        url: Location of the file (a ``file://`` URI for local uploads).
        type: MIME type, empty when it cannot be guessed.
        size: Size in bytes.
    """

    id: str
    name: str
    url: str
    type: str
    size: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "type": self.type,
            "size": self.size,
        }


@dataclass(slots=True)
class Alert:
    """A stored alert.

    ``created_at`` never changes after creation; ``updated_at`` is refreshed on
    every edit.
    """

    id: str
    title: str
    message: str
    type: str
    priority: str
    target_audience: str
    category: str
    status: str
    created_at: datetime
    updated_at: datetime
    created_by: str = "current-user"
    is_sticky: bool = False
    show_on_login: bool = False
    show_on_dashboard: bool = True
    scheduled_date: str | None = None
    expiry_date: str | None = None
    attachments: tuple[AlertAttachment, ...] | None = None
    read_by: tuple[str, ...] = ()
    dismissed_by: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "message": self.message,
            "type": self.type,
            "priority": self.priority,
            "targetAudience": self.target_audience,
            "category": self.category,
            "status": self.status,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "createdBy": self.created_by,
            "isSticky": self.is_sticky,
            "showOnLogin": self.show_on_login,
            "showOnDashboard": self.show_on_dashboard,
        }
        if self.scheduled_date:
            payload["scheduledDate"] = self.scheduled_date
        if self.expiry_date:
            payload["expiryDate"] = self.expiry_date
        if self.attachments:
            payload["attachments"] = [item.to_dict() for item in self.attachments]
        return payload


@dataclass(slots=True)
class AlertForm:
    """Values entered in the create/edit alert form."""

    title: str = ""
    message: str = ""
    type: str = "info"
    priority: str = "medium"
    target_audience: str = "all"
    category: str = "general"
    scheduled_date: str | None = None
    expiry_date: str | None = None
    is_sticky: bool = False
    show_on_login: bool = False
    show_on_dashboard: bool = True
    attachments: tuple[Path, ...] = ()


@dataclass(slots=True)
class AlertFilter:
    """Search term plus optional exact-match filters; empty means any."""

    search_term: str = ""
    status: str = ""
    type: str = ""
    priority: str = ""


@dataclass(slots=True)
class AlertStats:
    total: int = 0
    by_status: dict[str, int] = field(default_factory=dict)
    by_priority: dict[str, int] = field(default_factory=dict)
    by_type: dict[str, int] = field(default_factory=dict)


__all__ = [
    "ALERT_CATEGORIES",
    "ALERT_PRIORITIES",
    "ALERT_STATUSES",
    "ALERT_TYPES",
    "Alert",
    "AlertAttachment",
    "AlertFilter",
    "AlertForm",
    "AlertPriority",
    "AlertStats",
    "AlertStatus",
    "AlertType",
    "SortOrder",
    "TARGET_AUDIENCES",
]
