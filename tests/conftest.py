"""Shared pytest fixtures."""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from schooladmin.domain.book_store import BookStore
from schooladmin.domain.data_manager import DataManager
from schooladmin.domain.subject_catalog import SubjectCatalog
from schooladmin.domain.teacher_store import TeacherStore
from schooladmin.events import EventBus
from schooladmin.seed import demo_subjects

START = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


class SequentialIds:
    def __init__(self, prefix: str = "id") -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        return f"{self._prefix}-{next(self._counter)}"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def subjects() -> SubjectCatalog:
    return SubjectCatalog(demo_subjects())


@pytest.fixture
def book_store(subjects: SubjectCatalog, clock: FakeClock, ids: SequentialIds) -> BookStore:
    return BookStore(subjects=subjects, clock=clock, id_factory=ids)


@pytest.fixture
def teacher_store(subjects: SubjectCatalog, clock: FakeClock, ids: SequentialIds) -> TeacherStore:
    return TeacherStore(subjects=subjects, clock=clock, id_factory=ids)


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def data_manager(book_store: BookStore, teacher_store: TeacherStore, event_bus: EventBus) -> DataManager:
    return DataManager(book_store, teacher_store, event_bus=event_bus)
