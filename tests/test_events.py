"""Unit tests for :mod:`schooladmin.events`."""

from __future__ import annotations

import gc

import pytest

from schooladmin.events import (
    BookAdded,
    BookDeleted,
    EventBus,
    EventKind,
    Subscription,
    TeacherDeleted,
    resolve_event_type,
)


class _Listener:
    def __init__(self) -> None:
        self.calls = 0

    def on_book_added(self, event: BookAdded) -> None:
        self.calls += 1


# =============================================================================
# Event kinds
# =============================================================================


class TestResolveEventType:
    """Tests for mapping kind names to event classes."""

    def test_resolves_string_names(self) -> None:
        """Kind names as views spell them resolve to event classes."""
        assert resolve_event_type("book-added") is BookAdded
        assert resolve_event_type("teacher-deleted") is TeacherDeleted

    def test_resolves_enum_and_class(self) -> None:
        assert resolve_event_type(EventKind.BOOK_DELETED) is BookDeleted
        assert resolve_event_type(BookAdded) is BookAdded

    def test_unknown_name_raises(self) -> None:
        with pytest.raises(ValueError):
            resolve_event_type("book-archived")

    def test_six_kinds(self) -> None:
        assert len(EventKind) == 6


# =============================================================================
# Publishing
# =============================================================================


class TestEventBusPublish:
    """Tests for EventBus delivery."""

    def test_handlers_run_in_registration_order(self) -> None:
        """Handlers are invoked synchronously in subscription order."""
        bus = EventBus()
        order: list[str] = []
        bus.subscribe(BookAdded, lambda e: order.append("first"))
        bus.subscribe(BookAdded, lambda e: order.append("second"))

        bus.publish(BookAdded(book_id="b1"))

        assert order == ["first", "second"]

    def test_event_types_are_isolated(self) -> None:
        bus = EventBus()
        received: list[object] = []
        bus.subscribe(BookDeleted, received.append)

        bus.publish(BookAdded(book_id="b1"))

        assert received == []

    def test_failing_handler_does_not_stop_delivery(self, caplog: pytest.LogCaptureFixture) -> None:
        """A raising handler is logged and later handlers still run."""
        bus = EventBus()
        received: list[str] = []

        def broken(event: BookAdded) -> None:
            raise RuntimeError("boom")

        bus.subscribe(BookAdded, broken)
        bus.subscribe(BookAdded, lambda e: received.append(e.book_id))

        bus.publish(BookAdded(book_id="b1"))

        assert received == ["b1"]
        assert "broken" in caplog.text

    def test_zero_argument_handler(self) -> None:
        """pass_event=False calls the handler with no arguments."""
        bus = EventBus()
        calls: list[int] = []
        bus.subscribe(BookAdded, lambda: calls.append(1), pass_event=False)

        bus.publish(BookAdded(book_id="b1"))

        assert calls == [1]

    def test_handler_may_unsubscribe_during_delivery(self) -> None:
        bus = EventBus()
        calls: list[str] = []

        def once(event: BookAdded) -> None:
            calls.append("once")
            bus.unsubscribe(BookAdded, once)

        bus.subscribe(BookAdded, once)
        bus.subscribe(BookAdded, lambda e: calls.append("always"))

        bus.publish(BookAdded(book_id="b1"))
        bus.publish(BookAdded(book_id="b2"))

        assert calls == ["once", "always", "always"]


# =============================================================================
# Subscriptions
# =============================================================================


class TestSubscriptions:
    """Tests for unsubscribe and disposal handles."""

    def test_unsubscribe_by_identity(self) -> None:
        bus = EventBus()

        def handler(event: BookAdded) -> None:
            pass

        bus.subscribe(BookAdded, handler)

        assert bus.unsubscribe(BookAdded, handler) is True
        assert bus.unsubscribe(BookAdded, handler) is False
        assert bus.handler_count(BookAdded) == 0

    def test_dispose_is_idempotent(self) -> None:
        bus = EventBus()
        subscription = bus.subscribe(BookAdded, lambda e: None)

        assert isinstance(subscription, Subscription)
        subscription.dispose()
        subscription.dispose()

        assert subscription.active is False
        assert bus.handler_count() == 0

    def test_subscription_as_context_manager(self) -> None:
        bus = EventBus()
        with bus.subscribe(BookAdded, lambda e: None):
            assert bus.handler_count(BookAdded) == 1
        assert bus.handler_count(BookAdded) == 0

    def test_bound_method_is_weakly_held(self) -> None:
        """A discarded listener drops out of the bus on the next publish."""
        bus = EventBus()
        listener = _Listener()
        bus.subscribe(BookAdded, listener.on_book_added)
        bus.publish(BookAdded(book_id="b1"))
        assert listener.calls == 1

        del listener
        gc.collect()
        bus.publish(BookAdded(book_id="b2"))

        assert bus.handler_count(BookAdded) == 0

    def test_strongly_held_bound_method_outlives_its_owner(self) -> None:
        bus = EventBus()
        listener = _Listener()
        bus.subscribe(BookAdded, listener.on_book_added, weak=False)
        handler = listener.on_book_added

        del listener
        gc.collect()
        bus.publish(BookAdded(book_id="b1"))

        assert bus.handler_count(BookAdded) == 1
        assert handler.__self__.calls == 1
        assert bus.unsubscribe(BookAdded, handler) is True

    def test_clear_removes_everything(self) -> None:
        bus = EventBus()
        bus.subscribe(BookAdded, lambda e: None)
        bus.subscribe(TeacherDeleted, lambda e: None)

        bus.clear()

        assert bus.handler_count() == 0
