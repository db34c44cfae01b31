"""Tests for :mod:`schooladmin.domain.alert_manager`."""

from __future__ import annotations

from pathlib import Path

import pytest

from schooladmin.domain import alert_manager as module
from schooladmin.domain.alert_manager import AlertManager
from schooladmin.models.alert import Alert, AlertFilter, AlertForm


@pytest.fixture
def updates() -> list[list[Alert]]:
    return []


@pytest.fixture
def manager(clock, ids, updates) -> AlertManager:
    return AlertManager(clock=clock, id_factory=ids, page_size=2, on_update=updates.append)


def _form(title: str = "Heads up", message: str = "Read this", **overrides) -> AlertForm:
    return AlertForm(title=title, message=message, **overrides)


def _populate(manager: AlertManager, clock, count: int) -> list[Alert]:
    created = []
    for index in range(count):
        clock.advance(minutes=1)
        created.append(manager.save(_form(title=f"Alert {index}")).alert)
    return created


# =============================================================================
# Save
# =============================================================================


class TestSave:
    def test_create_defaults_to_draft(self, manager: AlertManager, clock, updates) -> None:
        result = manager.save(_form(priority="high"))

        assert result.success is True
        assert result.message == module.MSG_CREATED
        alert = result.alert
        assert alert.status == "draft"
        assert alert.created_at == alert.updated_at == clock()
        assert alert.created_by == "current-user"
        assert alert.attachments is None
        assert len(updates) == 1 and updates[0][0].id == alert.id

    def test_edit_refreshes_updated_at_only(self, manager: AlertManager, clock) -> None:
        original = manager.save(_form()).alert
        manager.set_status(original.id, "active")
        clock.advance(hours=1)

        result = manager.save(_form(title="Changed", type="warning"), editing_id=original.id)

        assert result.success is True
        assert result.message == module.MSG_UPDATED
        edited = result.alert
        assert edited.title == "Changed"
        assert edited.type == "warning"
        assert edited.status == "active"
        assert edited.created_at == original.created_at
        assert edited.updated_at == clock()

    def test_files_become_attachments(self, manager: AlertManager, tmp_path: Path) -> None:
        notes = tmp_path / "notes.txt"
        notes.write_text("hello", encoding="utf-8")

        alert = manager.save(_form(attachments=(notes,))).alert

        (attachment,) = alert.attachments
        assert attachment.name == "notes.txt"
        assert attachment.size == 5
        assert attachment.type == "text/plain"
        assert attachment.url.startswith("file://")
        assert attachment.id.startswith("attachment-")

    def test_edit_without_files_keeps_attachments(self, manager: AlertManager, tmp_path: Path) -> None:
        notes = tmp_path / "notes.txt"
        notes.write_text("hello", encoding="utf-8")
        alert = manager.save(_form(attachments=(notes,))).alert

        edited = manager.save(_form(title="Again"), editing_id=alert.id).alert

        assert edited.attachments == alert.attachments

    def test_missing_file_fails_without_raising(self, manager: AlertManager, tmp_path: Path, updates) -> None:
        result = manager.save(_form(attachments=(tmp_path / "absent.pdf",)))

        assert result.success is False
        assert result.message.startswith(module.MSG_SAVE_FAILED)
        assert len(manager) == 0
        assert updates == []

    @pytest.mark.parametrize(
        "form",
        [_form(title=" "), _form(message=""), _form(priority="critical"), _form(target_audience="aliens")],
    )
    def test_invalid_forms_fail_without_raising(self, manager: AlertManager, form: AlertForm) -> None:
        result = manager.save(form)

        assert result.success is False
        assert result.alert is None
        assert len(manager) == 0

    def test_edit_unknown(self, manager: AlertManager) -> None:
        result = manager.save(_form(), editing_id="missing")

        assert (result.success, result.message) == (False, module.MSG_NOT_FOUND)

    def test_listener_errors_are_contained(self, clock) -> None:
        def broken(alerts: list[Alert]) -> None:
            raise RuntimeError("listener down")

        manager = AlertManager(clock=clock, on_update=broken)

        assert manager.save(_form()).success is True


# =============================================================================
# Delete
# =============================================================================


class TestDelete:
    def test_requires_confirmation(self, manager: AlertManager) -> None:
        alert = manager.save(_form()).alert

        result = manager.delete(alert.id)

        assert result.success is False
        assert result.message == module.MSG_NOT_CONFIRMED
        assert manager.get_alert(alert.id) is not None

    def test_confirmed_delete(self, manager: AlertManager, updates) -> None:
        alert = manager.save(_form()).alert

        result = manager.delete(alert.id, confirmed=True)

        assert result.success is True
        assert manager.list_alerts() == []
        assert updates[-1] == []

    def test_unknown_id(self, manager: AlertManager) -> None:
        assert manager.delete("missing", confirmed=True).success is False


# =============================================================================
# View state
# =============================================================================


class TestFilterSortPaginate:
    def test_default_sort_is_newest_first(self, manager: AlertManager, clock) -> None:
        created = _populate(manager, clock, 3)

        assert manager.sort_by == "created_at"
        assert manager.sort_order == "desc"
        assert [a.id for a in manager.visible_alerts()] == [a.id for a in reversed(created)]

    def test_search_matches_title_or_message(self, manager: AlertManager) -> None:
        manager.save(_form(title="Exam schedule", message="See board"))
        manager.save(_form(title="Holiday", message="No EXAMS this week"))
        manager.save(_form(title="Lunch", message="Menu"))

        manager.set_filter(search_term="exam")

        assert sorted(a.title for a in manager.visible_alerts()) == ["Exam schedule", "Holiday"]

    def test_exact_filters_combine(self, manager: AlertManager) -> None:
        manager.save(_form(type="info", priority="low"))
        manager.save(_form(type="error", priority="urgent"))
        manager.save(_form(type="error", priority="low"))

        manager.set_filter(AlertFilter(type="error", priority="low"))

        assert len(manager.visible_alerts()) == 1
        manager.clear_filter()
        assert len(manager.visible_alerts()) == 3

    def test_toggle_sort(self, manager: AlertManager) -> None:
        manager.toggle_sort("title")
        assert (manager.sort_by, manager.sort_order) == ("title", "asc")

        manager.toggle_sort("title")
        assert manager.sort_order == "desc"

        manager.toggle_sort("priority")
        assert (manager.sort_by, manager.sort_order) == ("priority", "asc")

    def test_unknown_sort_field(self, manager: AlertManager) -> None:
        with pytest.raises(ValueError):
            manager.toggle_sort("attachments")

    def test_ties_keep_insertion_order(self, manager: AlertManager, clock) -> None:
        created = _populate(manager, clock, 3)

        manager.set_sort("priority", "asc")
        assert [a.id for a in manager.visible_alerts()] == [a.id for a in created]
        manager.set_sort("priority", "desc")
        assert [a.id for a in manager.visible_alerts()] == [a.id for a in created]

    def test_pagination_is_clamped(self, manager: AlertManager, clock) -> None:
        _populate(manager, clock, 5)

        assert manager.page_count == 3
        assert manager.set_page(10) == 3
        assert len(manager.current_page()) == 1
        assert manager.set_page(0) == 1
        assert len(manager.current_page()) == 2

    def test_changes_reset_the_page(self, manager: AlertManager, clock) -> None:
        _populate(manager, clock, 5)

        manager.set_page(2)
        manager.set_filter(search_term="Alert")
        assert manager.page == 1

        manager.set_page(3)
        manager.toggle_sort("title")
        assert manager.page == 1

        manager.set_page(3)
        manager.save(_form())
        assert manager.page == 1

    def test_empty_collection_has_no_pages(self, manager: AlertManager) -> None:
        assert manager.page_count == 0
        assert manager.set_page(5) == 1
        assert manager.current_page() == []


def test_stats(manager: AlertManager) -> None:
    manager.save(_form(type="info", priority="low"))
    warning = manager.save(_form(type="warning", priority="urgent")).alert
    manager.set_status(warning.id, "active")

    stats = manager.stats()

    assert stats.total == 2
    assert stats.by_status["draft"] == 1
    assert stats.by_status["active"] == 1
    assert stats.by_priority["urgent"] == 1
    assert stats.by_type["info"] == 1
    assert stats.by_type["error"] == 0


def test_set_status_rejects_unknown(manager: AlertManager) -> None:
    alert = manager.save(_form()).alert

    assert manager.set_status(alert.id, "deleted").success is False
    assert manager.get_alert(alert.id).status == "draft"
