"""Event bus infrastructure for change notifications.

Stores publish typed events after a successful mutation; views subscribe and
re-read the affected collection. Events carry the id of the touched record
only, never a snapshot of the collection.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import (
    Any,
    Callable,
    Generic,
    TypeVar,
    TYPE_CHECKING,
)
from weakref import WeakMethod, ref

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from typing import DefaultDict

logger = logging.getLogger(__name__)

E = TypeVar("E", bound="Event")

Handler = Callable[[E], None]


@dataclass(slots=True)
class Event:
    """Base class for all events in the system.

    Example::

        @dataclass(slots=True)
        class BookAdded(Event):
            book_id: str
    """

    pass


class EventKind(str, Enum):
    """String names of the change events, as views refer to them."""

    TEACHER_ADDED = "teacher-added"
    TEACHER_UPDATED = "teacher-updated"
    TEACHER_DELETED = "teacher-deleted"
    BOOK_ADDED = "book-added"
    BOOK_UPDATED = "book-updated"
    BOOK_DELETED = "book-deleted"


# =============================================================================
# Teacher Events
# =============================================================================


@dataclass(slots=True)
class TeacherAdded(Event):
    """Emitted after a teacher is created.

    Attributes:
        teacher_id: The id of the new teacher.
    """

    teacher_id: str


@dataclass(slots=True)
class TeacherUpdated(Event):
    """Emitted after an existing teacher is edited."""

    teacher_id: str


@dataclass(slots=True)
class TeacherDeleted(Event):
    """Emitted after a teacher is removed."""

    teacher_id: str


# =============================================================================
# Book Events
# =============================================================================


@dataclass(slots=True)
class BookAdded(Event):
    """Emitted after a book is created.

    Attributes:
        book_id: The opaque id of the new book (not its display code).
    """

    book_id: str


@dataclass(slots=True)
class BookUpdated(Event):
    """Emitted after an existing book is edited."""

    book_id: str


@dataclass(slots=True)
class BookDeleted(Event):
    """Emitted after a book is removed."""

    book_id: str


EVENT_TYPES: dict[EventKind, type[Event]] = {
    EventKind.TEACHER_ADDED: TeacherAdded,
    EventKind.TEACHER_UPDATED: TeacherUpdated,
    EventKind.TEACHER_DELETED: TeacherDeleted,
    EventKind.BOOK_ADDED: BookAdded,
    EventKind.BOOK_UPDATED: BookUpdated,
    EventKind.BOOK_DELETED: BookDeleted,
}


def resolve_event_type(kind: EventKind | str | type[Event]) -> type[Event]:
    """Map an event kind name (``"book-added"``) or class to its event class.

    Raises:
        ValueError: If ``kind`` names no known event.
    """
    if isinstance(kind, type) and issubclass(kind, Event):
        return kind
    return EVENT_TYPES[EventKind(kind)]


class Subscription:
    """Handle returned by :meth:`EventBus.subscribe`.

    Calling :meth:`dispose` removes the registration; it is safe to call more
    than once. The handle also works as a context manager.
    """

    __slots__ = ("_bus", "_event_type", "_handler", "_active")

    def __init__(self, bus: EventBus, event_type: type[Event], handler: Callable[..., None]) -> None:
        self._bus = bus
        self._event_type = event_type
        self._handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    @property
    def event_type(self) -> type[Event]:
        return self._event_type

    def dispose(self) -> None:
        if not self._active:
            return
        self._active = False
        self._bus.unsubscribe(self._event_type, self._handler)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()


class EventBus(Generic[E]):
    """A typed publish-subscribe event bus for decoupled communication.

    Bound-method handlers are stored as weak references unless subscribed
    with ``weak=False``, so a discarded view drops out without unsubscribing.

    Example::

        bus = EventBus()

        def on_book_added(event: BookAdded) -> None:
            print(f"Added: {event.book_id}")

        subscription = bus.subscribe(BookAdded, on_book_added)
        bus.publish(BookAdded(book_id="b1"))
        subscription.dispose()

    Thread Safety:
        This implementation is NOT thread-safe. All operations are expected
        to run on the single thread that owns the stores.

    Attributes:
        _handlers: Mapping from event type to list of handler references.
    """

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        """Initialize an empty event bus."""
        self._handlers: DefaultDict[type[Event], list[_HandlerRef]] = defaultdict(list)

    def subscribe(
        self,
        event_type: type[E],
        handler: Callable[..., None],
        *,
        pass_event: bool = True,
        weak: bool = True,
    ) -> Subscription:
        """Register a handler to receive events of the specified type.

        Args:
            event_type: The class of events to subscribe to.
            handler: A callable invoked on publish.
            pass_event: When False the handler is called with no arguments.
            weak: When False a bound method is held strongly and stays
                registered until it is unsubscribed.

        Returns:
            A :class:`Subscription` whose ``dispose()`` removes the handler.

        Note:
            Subscribing the same handler multiple times will result in
            multiple invocations when an event is published.
        """
        handler_ref = _HandlerRef.create(handler, pass_event=pass_event, weak=weak)
        self._handlers[event_type].append(handler_ref)
        logger.debug(
            "Subscribed handler %s to event type %s",
            _handler_name(handler),
            event_type.__name__,
        )
        return Subscription(self, event_type, handler)

    def unsubscribe(self, event_type: type[E], handler: Callable[..., None]) -> bool:
        """Remove a previously registered handler.

        If the handler was registered multiple times, only the first
        occurrence is removed.

        Returns:
            True if a registration was removed, False otherwise.
        """
        handlers = self._handlers.get(event_type)
        if handlers is None:
            return False

        for i, handler_ref in enumerate(handlers):
            if handler_ref.matches(handler):
                handlers.pop(i)
                logger.debug(
                    "Unsubscribed handler %s from event type %s",
                    _handler_name(handler),
                    event_type.__name__,
                )
                return True
        return False

    def publish(self, event: Event) -> None:
        """Broadcast an event to all registered handlers.

        Handlers are invoked synchronously in the order they were
        registered. If a handler raises an exception, it is logged
        and remaining handlers continue to be invoked.
        """
        event_type = type(event)
        handlers = self._handlers.get(event_type)

        if not handlers:
            logger.debug("No handlers for event type %s", event_type.__name__)
            return

        logger.debug(
            "Publishing %s to %d handler(s)",
            event_type.__name__,
            len(handlers),
        )

        dead: list[_HandlerRef] = []

        # Iterate over a copy so handlers may unsubscribe during delivery
        for handler_ref in list(handlers):
            handler = handler_ref.resolve()
            if handler is None:
                dead.append(handler_ref)
                continue

            try:
                if handler_ref.pass_event:
                    handler(event)
                else:
                    handler()
            except Exception:
                logger.exception(
                    "Handler %s raised exception for event %s",
                    _handler_name(handler),
                    event_type.__name__,
                )

        for handler_ref in dead:
            if handler_ref in handlers:
                handlers.remove(handler_ref)

    def clear(self) -> None:
        """Remove all registered handlers."""
        self._handlers.clear()
        logger.debug("Cleared all event handlers")

    def handler_count(self, event_type: type[Event] | None = None) -> int:
        """Return the number of registered handlers.

        Args:
            event_type: If provided, return count for that event type only.
                       If None, return total count across all event types.
        """
        if event_type is not None:
            return len(self._handlers.get(event_type, []))
        return sum(len(handlers) for handlers in self._handlers.values())


class _HandlerRef:
    """Wrapper for handler references supporting both weak and strong refs.

    Bound methods are held through WeakMethod unless ``weak`` is False.
    Plain functions and lambdas are always held strongly.
    """

    __slots__ = ("_ref", "_is_weak", "pass_event")

    def __init__(
        self,
        handler_ref: WeakMethod | ref | Callable[..., None],
        is_weak: bool,
        pass_event: bool,
    ) -> None:
        self._ref = handler_ref
        self._is_weak = is_weak
        self.pass_event = pass_event

    @classmethod
    def create(
        cls, handler: Callable[..., None], *, pass_event: bool = True, weak: bool = True
    ) -> _HandlerRef:
        if weak and hasattr(handler, "__self__") and hasattr(handler, "__func__"):
            try:
                return cls(WeakMethod(handler), is_weak=True, pass_event=pass_event)
            except TypeError:
                pass

        return cls(handler, is_weak=False, pass_event=pass_event)

    def resolve(self) -> Callable[..., None] | None:
        """Return the handler, or None if it was garbage collected."""
        if not self._is_weak:
            return self._ref  # type: ignore[return-value]
        return self._ref()  # type: ignore[operator]

    def matches(self, handler: Callable[..., None]) -> bool:
        resolved = self.resolve()
        if resolved is None:
            return False
        return resolved == handler


def _handler_name(handler: Callable[..., Any]) -> str:
    """Get a human-readable name for a handler for logging purposes."""
    if hasattr(handler, "__self__") and hasattr(handler, "__func__"):
        cls_name = type(handler.__self__).__name__
        return f"{cls_name}.{handler.__func__.__name__}"
    if hasattr(handler, "__name__"):
        return handler.__name__
    return repr(handler)


__all__ = [
    "EVENT_TYPES",
    "BookAdded",
    "BookDeleted",
    "BookUpdated",
    "Event",
    "EventBus",
    "EventKind",
    "Handler",
    "Subscription",
    "TeacherAdded",
    "TeacherDeleted",
    "TeacherUpdated",
    "resolve_event_type",
]
