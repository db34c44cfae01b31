"""Alert manager: CRUD plus the filter, sort and pagination state of the alert screen.

This subsystem is deliberately separate from :class:`DataManager`; it shares
no data with books or teachers and publishes nothing on the event bus. The
only notification channel is the optional ``on_update`` callback, which
receives the full alert list after each successful mutation.

Unlike the stores, :meth:`AlertManager.save` and :meth:`AlertManager.delete`
never raise. Failures come back as an :class:`OperationResult` whose
``message`` is ready to show in a banner.
"""

from __future__ import annotations

import logging
import math
import mimetypes
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

from ..errors import AdminError, ValidationError
from ..models.alert import (
    ALERT_CATEGORIES,
    ALERT_PRIORITIES,
    ALERT_STATUSES,
    ALERT_TYPES,
    TARGET_AUDIENCES,
    Alert,
    AlertAttachment,
    AlertFilter,
    AlertForm,
    AlertStats,
)
from ..utils.identifiers import Clock, epoch_millis, new_id, short_token, utc_now
from .changes import is_blank

LOGGER = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
DEFAULT_SORT_FIELD = "created_at"

MSG_CREATED = "Alert created successfully."
MSG_UPDATED = "Alert updated successfully."
MSG_DELETED = "Alert deleted successfully."
MSG_STATUS_CHANGED = "Alert status updated."
MSG_SAVE_FAILED = "An error occurred while saving the alert."
MSG_DELETE_FAILED = "An error occurred while deleting the alert."
MSG_NOT_CONFIRMED = "Deletion was not confirmed."
MSG_NOT_FOUND = "Alert not found."

_UNSORTABLE_FIELDS = frozenset({"attachments", "read_by", "dismissed_by"})
SORTABLE_FIELDS: tuple[str, ...] = tuple(
    f.name for f in fields(Alert) if f.name not in _UNSORTABLE_FIELDS
)

_FORM_ENUMS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("type", ALERT_TYPES),
    ("priority", ALERT_PRIORITIES),
    ("target_audience", TARGET_AUDIENCES),
    ("category", ALERT_CATEGORIES),
)

AlertListener = Callable[[list[Alert]], None]


@dataclass(slots=True)
class OperationResult:
    """Outcome of a UI-facing alert operation."""

    success: bool
    message: str
    alert: Alert | None = None


class AlertManager:
    """In-memory alert collection with view state.

    Any change to the filter, the sort or the collection sends the view back
    to page 1.
    """

    def __init__(
        self,
        alerts: Iterable[Alert] = (),
        *,
        clock: Clock | None = None,
        id_factory: Callable[[], str] | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        on_update: AlertListener | None = None,
    ) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._alerts: list[Alert] = [replace(alert) for alert in alerts]
        self._clock: Clock = clock or utc_now
        self._id_factory = id_factory or new_id
        self._page_size = page_size
        self._on_update = on_update
        self._filter = AlertFilter()
        self._sort_by = DEFAULT_SORT_FIELD
        self._sort_order = "desc"
        self._page = 1

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------

    def list_alerts(self) -> list[Alert]:
        """Return copies of every alert in insertion order, ignoring view state."""
        return [replace(alert) for alert in self._alerts]

    def get_alert(self, alert_id: str) -> Alert | None:
        index = self._index_of(alert_id)
        return None if index is None else replace(self._alerts[index])

    def __len__(self) -> int:
        return len(self._alerts)

    # ------------------------------------------------------------------
    # View state
    # ------------------------------------------------------------------

    @property
    def filter(self) -> AlertFilter:
        return replace(self._filter)

    def set_filter(self, alert_filter: AlertFilter | None = None, **changes: str) -> None:
        """Replace the filter, or update individual filter fields by keyword."""
        base = alert_filter if alert_filter is not None else self._filter
        self._filter = replace(base, **changes)
        self._page = 1

    def clear_filter(self) -> None:
        self.set_filter(AlertFilter())

    @property
    def sort_by(self) -> str:
        return self._sort_by

    @property
    def sort_order(self) -> str:
        return self._sort_order

    def set_sort(self, field_name: str, order: str = "asc") -> None:
        if field_name not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort alerts by {field_name!r}")
        if order not in ("asc", "desc"):
            raise ValueError(f"Sort order must be 'asc' or 'desc', got {order!r}")
        self._sort_by = field_name
        self._sort_order = order
        self._page = 1

    def toggle_sort(self, field_name: str) -> None:
        """Flip the order on the current column, otherwise sort the new column ascending."""
        if field_name == self._sort_by:
            self.set_sort(field_name, "desc" if self._sort_order == "asc" else "asc")
        else:
            self.set_sort(field_name, "asc")

    @property
    def page(self) -> int:
        return self._page

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def page_count(self) -> int:
        return math.ceil(len(self.visible_alerts()) / self._page_size)

    def set_page(self, page: int) -> int:
        """Move to ``page`` clamped into the available range; return the page shown."""
        self._page = max(1, min(int(page), max(1, self.page_count)))
        return self._page

    def visible_alerts(self) -> list[Alert]:
        """Return the filtered and sorted alerts across all pages."""
        matching = [replace(alert) for alert in self._alerts if self._matches(alert)]
        return sorted(
            matching,
            key=lambda alert: _sort_key(alert, self._sort_by),
            reverse=self._sort_order == "desc",
        )

    def current_page(self) -> list[Alert]:
        start = (self._page - 1) * self._page_size
        return self.visible_alerts()[start:start + self._page_size]

    def stats(self) -> AlertStats:
        """Count every alert by status, priority and type."""
        by_status = {status: 0 for status in ALERT_STATUSES}
        by_priority = {priority: 0 for priority in ALERT_PRIORITIES}
        by_type = {kind: 0 for kind in ALERT_TYPES}
        for alert in self._alerts:
            by_status[alert.status] = by_status.get(alert.status, 0) + 1
            by_priority[alert.priority] = by_priority.get(alert.priority, 0) + 1
            by_type[alert.type] = by_type.get(alert.type, 0) + 1
        return AlertStats(
            total=len(self._alerts),
            by_status=by_status,
            by_priority=by_priority,
            by_type=by_type,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def save(self, form: AlertForm, editing_id: str | None = None) -> OperationResult:
        """Create a draft alert, or merge ``form`` over the alert ``editing_id``."""
        try:
            _validate_form(form)
            if editing_id is None:
                alert = self._create(form)
                message = MSG_CREATED
            else:
                alert = self._update(editing_id, form)
                if alert is None:
                    return OperationResult(False, MSG_NOT_FOUND)
                message = MSG_UPDATED
        except (AdminError, OSError) as exc:
            LOGGER.warning("Alert save failed: %s", exc)
            return OperationResult(False, f"{MSG_SAVE_FAILED} {exc}")
        except Exception:
            LOGGER.exception("Unexpected error while saving alert")
            return OperationResult(False, MSG_SAVE_FAILED)

        self._collection_changed()
        return OperationResult(True, message, replace(alert))

    def delete(self, alert_id: str, *, confirmed: bool = False) -> OperationResult:
        """Remove an alert once the user has confirmed the deletion."""
        if not confirmed:
            return OperationResult(False, MSG_NOT_CONFIRMED)
        try:
            index = self._index_of(alert_id)
            if index is None:
                return OperationResult(False, MSG_NOT_FOUND)
            removed = self._alerts.pop(index)
        except Exception:
            LOGGER.exception("Unexpected error while deleting alert %s", alert_id)
            return OperationResult(False, MSG_DELETE_FAILED)

        LOGGER.debug("AlertManager.delete: id=%s", alert_id)
        self._collection_changed()
        return OperationResult(True, MSG_DELETED, removed)

    def set_status(self, alert_id: str, status: str) -> OperationResult:
        """Move an alert through its lifecycle (publish, archive, ...)."""
        if status not in ALERT_STATUSES:
            return OperationResult(False, f"Unknown alert status {status!r}")
        index = self._index_of(alert_id)
        if index is None:
            return OperationResult(False, MSG_NOT_FOUND)
        updated = replace(self._alerts[index], status=status, updated_at=self._clock())
        self._alerts[index] = updated
        LOGGER.debug("AlertManager.set_status: id=%s, status=%s", alert_id, status)
        self._collection_changed()
        return OperationResult(True, MSG_STATUS_CHANGED, replace(updated))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _create(self, form: AlertForm) -> Alert:
        now = self._clock()
        alert = Alert(
            id=self._id_factory(),
            title=form.title.strip(),
            message=form.message.strip(),
            type=form.type,
            priority=form.priority,
            target_audience=form.target_audience,
            category=form.category,
            status="draft",
            created_at=now,
            updated_at=now,
            is_sticky=form.is_sticky,
            show_on_login=form.show_on_login,
            show_on_dashboard=form.show_on_dashboard,
            scheduled_date=form.scheduled_date or None,
            expiry_date=form.expiry_date or None,
            attachments=self._attachments_from(form.attachments),
        )
        self._alerts.append(alert)
        LOGGER.debug("AlertManager.save: created id=%s", alert.id)
        return alert

    def _update(self, alert_id: str, form: AlertForm) -> Alert | None:
        index = self._index_of(alert_id)
        if index is None:
            LOGGER.debug("AlertManager.save: unknown id=%s", alert_id)
            return None
        existing = self._alerts[index]
        attachments = self._attachments_from(form.attachments) if form.attachments else existing.attachments
        updated = replace(
            existing,
            title=form.title.strip(),
            message=form.message.strip(),
            type=form.type,
            priority=form.priority,
            target_audience=form.target_audience,
            category=form.category,
            is_sticky=form.is_sticky,
            show_on_login=form.show_on_login,
            show_on_dashboard=form.show_on_dashboard,
            scheduled_date=form.scheduled_date or None,
            expiry_date=form.expiry_date or None,
            attachments=attachments,
            updated_at=self._clock(),
        )
        self._alerts[index] = updated
        LOGGER.debug("AlertManager.save: updated id=%s", alert_id)
        return updated

    def _attachments_from(self, paths: Sequence[Path]) -> tuple[AlertAttachment, ...] | None:
        if not paths:
            return None
        stamp = epoch_millis(self._clock())
        attachments = []
        for raw in paths:
            path = Path(raw).expanduser().resolve()
            size = path.stat().st_size
            mime, _ = mimetypes.guess_type(path.name)
            attachments.append(
                AlertAttachment(
                    id=f"attachment-{stamp}-{short_token()}",
                    name=path.name,
                    url=path.as_uri(),
                    type=mime or "",
                    size=size,
                )
            )
        return tuple(attachments)

    def _matches(self, alert: Alert) -> bool:
        criteria = self._filter
        term = criteria.search_term.lower()
        if term and term not in alert.title.lower() and term not in alert.message.lower():
            return False
        if criteria.status and alert.status != criteria.status:
            return False
        if criteria.type and alert.type != criteria.type:
            return False
        if criteria.priority and alert.priority != criteria.priority:
            return False
        return True

    def _index_of(self, alert_id: str) -> int | None:
        for index, alert in enumerate(self._alerts):
            if alert.id == alert_id:
                return index
        return None

    def _collection_changed(self) -> None:
        self._page = 1
        if self._on_update is None:
            return
        try:
            self._on_update(self.list_alerts())
        except Exception:
            LOGGER.exception("Alert update listener raised")


def _sort_key(alert: Alert, field_name: str) -> Any:
    value = getattr(alert, field_name)
    return "" if value is None else value


def _validate_form(form: AlertForm) -> None:
    if is_blank(form.title):
        raise ValidationError(message="Alert title must not be empty", field_name="title")
    if is_blank(form.message):
        raise ValidationError(message="Alert message must not be empty", field_name="message")
    for name, allowed in _FORM_ENUMS:
        value = getattr(form, name)
        if value not in allowed:
            raise ValidationError(
                message=f"Alert {name} must be one of {', '.join(allowed)}, got {value!r}",
                field_name=name,
            )


__all__ = [
    "AlertListener",
    "AlertManager",
    "DEFAULT_PAGE_SIZE",
    "OperationResult",
    "SORTABLE_FIELDS",
]
