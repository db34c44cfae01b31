"""Data manager: the single façade views depend on for books and teachers.

Wraps a :class:`BookStore` and a :class:`TeacherStore`, publishes a change
event after every successful mutation, and refuses to delete a teacher while
any book still carries that teacher's name.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from ..errors import ConstraintViolation
from ..events import (
    BookAdded,
    BookDeleted,
    BookUpdated,
    Event,
    EventBus,
    EventKind,
    Subscription,
    TeacherAdded,
    TeacherDeleted,
    TeacherUpdated,
    resolve_event_type,
)
from ..models.book import Book, BookDraft, Subject
from ..models.teacher import Teacher, TeacherDraft
from .book_store import BookStore
from .teacher_store import TeacherStore

LOGGER = logging.getLogger(__name__)


class DataManager:
    """Coordinating façade over the book and teacher stores.

    Holds no collection state of its own. "Not found" results pass through as
    ``None``/``False`` and publish nothing; store exceptions propagate
    unchanged.

    Events Emitted:
        - TeacherAdded / TeacherUpdated / TeacherDeleted
        - BookAdded / BookUpdated / BookDeleted
    """

    __slots__ = ("_books", "_teachers", "_bus")

    def __init__(
        self,
        books: BookStore,
        teachers: TeacherStore,
        *,
        event_bus: EventBus | None = None,
    ) -> None:
        self._books = books
        self._teachers = teachers
        self._bus: EventBus = event_bus if event_bus is not None else EventBus()

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(
        self,
        kind: EventKind | str | type[Event],
        callback: Callable[..., None],
        *,
        pass_event: bool = False,
    ) -> Subscription:
        """Register ``callback`` for one kind of change.

        Callbacks take no arguments unless ``pass_event`` is set. They run
        synchronously in registration order right after the mutation and
        stay registered until unsubscribed or disposed.

        Returns:
            A handle whose ``dispose()`` unsubscribes the callback.
        """
        return self._bus.subscribe(
            resolve_event_type(kind), callback, pass_event=pass_event, weak=False
        )

    def unsubscribe(self, kind: EventKind | str | type[Event], callback: Callable[..., None]) -> bool:
        """Remove ``callback`` by identity; return False if it was not registered."""
        return self._bus.unsubscribe(resolve_event_type(kind), callback)

    # ------------------------------------------------------------------
    # Teachers
    # ------------------------------------------------------------------

    def list_teachers(self) -> list[Teacher]:
        return self._teachers.list_teachers()

    def get_teacher(self, teacher_id: str) -> Teacher | None:
        return self._teachers.get_teacher(teacher_id)

    def add_teacher(self, draft: TeacherDraft | Mapping[str, Any]) -> Teacher:
        teacher = self._teachers.add_teacher(draft)
        self._bus.publish(TeacherAdded(teacher_id=teacher.id))
        return teacher

    def update_teacher(self, teacher_id: str, changes: TeacherDraft | Mapping[str, Any]) -> Teacher | None:
        teacher = self._teachers.update_teacher(teacher_id, changes)
        if teacher is not None:
            self._bus.publish(TeacherUpdated(teacher_id=teacher.id))
        return teacher

    def delete_teacher(self, teacher_id: str) -> bool:
        """Delete a teacher that no book refers to.

        Returns:
            False if no teacher has ``teacher_id``; True once deleted.

        Raises:
            ConstraintViolation: If any book's ``teacher_name`` equals the
                teacher's name. Nothing is deleted and nothing is published.
        """
        teacher = self._teachers.get_teacher(teacher_id)
        if teacher is None:
            LOGGER.debug("DataManager.delete_teacher: unknown id=%s", teacher_id)
            return False

        blocking = self.count_books_by_teacher_name(teacher.name)
        if blocking:
            LOGGER.info(
                "Refusing to delete teacher id=%s: %d book(s) reference %r",
                teacher_id,
                blocking,
                teacher.name,
            )
            raise ConstraintViolation.teacher_has_books(teacher.name, blocking)

        deleted = self._teachers.delete_teacher(teacher_id)
        if deleted:
            self._bus.publish(TeacherDeleted(teacher_id=teacher_id))
        return deleted

    def teacher_choices(self) -> list[tuple[str, str]]:
        """Return ``(id, name)`` pairs for teacher pickers."""
        return [(teacher.id, teacher.name) for teacher in self._teachers.list_teachers()]

    # ------------------------------------------------------------------
    # Books
    # ------------------------------------------------------------------

    def list_books(self) -> list[Book]:
        return self._books.list_books()

    def get_book(self, book_id: str) -> Book | None:
        return self._books.get_book(book_id)

    def add_book(self, draft: BookDraft | Mapping[str, Any]) -> Book:
        book = self._books.add_book(draft)
        self._bus.publish(BookAdded(book_id=book.id))
        return book

    def update_book(self, book_id: str, changes: BookDraft | Mapping[str, Any]) -> Book | None:
        book = self._books.update_book(book_id, changes)
        if book is not None:
            self._bus.publish(BookUpdated(book_id=book.id))
        return book

    def delete_book(self, book_id: str) -> bool:
        deleted = self._books.delete_book(book_id)
        if deleted:
            self._bus.publish(BookDeleted(book_id=book_id))
        return deleted

    def list_books_by_teacher_name(self, teacher_name: str) -> list[Book]:
        return [book for book in self._books.list_books() if book.teacher_name == teacher_name]

    def count_books_by_teacher_name(self, teacher_name: str) -> int:
        return len(self.list_books_by_teacher_name(teacher_name))

    # ------------------------------------------------------------------
    # Subjects
    # ------------------------------------------------------------------

    def list_subjects(self) -> list[Subject]:
        return self._books.list_subjects()


__all__ = ["DataManager"]
