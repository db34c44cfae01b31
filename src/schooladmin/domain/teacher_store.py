"""Teacher store domain manager.

Owns the in-memory Teacher collection and keeps each teacher's ``subject``
display name in step with its ``subject_id`` by resolving it against the
subject catalog on every write.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Iterable, Mapping

from ..errors import ValidationError
from ..models.teacher import DEFAULT_HONORIFICS, Teacher, TeacherDraft, has_honorific
from ..utils.identifiers import Clock, new_id, utc_now
from .changes import collect_changes
from .subject_catalog import SubjectCatalog

LOGGER = logging.getLogger(__name__)

_EDITABLE_FIELDS: tuple[str, ...] = ("name", "subject_id")


class TeacherStore:
    """Domain manager for the Teacher collection.

    Deletion here is unconditional; the guard against orphaning books lives
    in the data manager, which can see both collections.
    """

    __slots__ = ("_teachers", "_subjects", "_clock", "_id_factory", "_honorifics")

    def __init__(
        self,
        teachers: Iterable[Teacher] = (),
        *,
        subjects: SubjectCatalog,
        clock: Clock | None = None,
        id_factory: Callable[[], str] | None = None,
        honorifics: tuple[str, ...] = DEFAULT_HONORIFICS,
    ) -> None:
        self._teachers: list[Teacher] = [replace(teacher) for teacher in teachers]
        self._subjects = subjects
        self._clock: Clock = clock or utc_now
        self._id_factory = id_factory or new_id
        self._honorifics = honorifics

    @property
    def honorifics(self) -> tuple[str, ...]:
        return self._honorifics

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_teachers(self) -> list[Teacher]:
        return [replace(teacher) for teacher in self._teachers]

    def get_teacher(self, teacher_id: str) -> Teacher | None:
        index = self._index_of(teacher_id)
        return None if index is None else replace(self._teachers[index])

    def list_teachers_by_subject(self, subject_id: str) -> list[Teacher]:
        return [replace(teacher) for teacher in self._teachers if teacher.subject_id == subject_id]

    def find_by_name(self, name: str) -> Teacher | None:
        for teacher in self._teachers:
            if teacher.name == name:
                return replace(teacher)
        return None

    def __len__(self) -> int:
        return len(self._teachers)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_teacher(self, draft: TeacherDraft | Mapping[str, Any]) -> Teacher:
        """Create a teacher, resolving its subject name from the catalog.

        Raises:
            ValidationError: If the name lacks an honorific prefix.
            NotFoundError: If ``subject_id`` is not in the catalog.
        """
        values = collect_changes(draft, _EDITABLE_FIELDS, owner="TeacherStore.add_teacher")
        name = self._validated_name(values.get("name"))
        subject = self._subjects.require(str(values.get("subject_id") or ""))
        teacher = Teacher(
            id=self._id_factory(),
            name=name,
            subject=subject.name,
            subject_id=subject.id,
            date_added=self._clock().date().isoformat(),
        )
        self._teachers.append(teacher)
        LOGGER.debug("TeacherStore.add_teacher: id=%s, subject_id=%s", teacher.id, subject.id)
        return replace(teacher)

    def update_teacher(self, teacher_id: str, changes: TeacherDraft | Mapping[str, Any]) -> Teacher | None:
        """Merge ``changes`` over a teacher and re-resolve its subject.

        Returns:
            A copy of the updated teacher, or None if ``teacher_id`` is unknown.

        Raises:
            ValidationError: If the merged name lacks an honorific prefix.
            NotFoundError: If the merged ``subject_id`` is not in the catalog.
        """
        index = self._index_of(teacher_id)
        if index is None:
            LOGGER.debug("TeacherStore.update_teacher: unknown id=%s", teacher_id)
            return None

        existing = self._teachers[index]
        values = collect_changes(changes, _EDITABLE_FIELDS, owner="TeacherStore.update_teacher")
        name = self._validated_name(values.get("name", existing.name))
        subject = self._subjects.require(str(values.get("subject_id", existing.subject_id) or ""))
        updated = replace(existing, name=name, subject=subject.name, subject_id=subject.id)
        self._teachers[index] = updated
        LOGGER.debug("TeacherStore.update_teacher: id=%s, subject_id=%s", teacher_id, subject.id)
        return replace(updated)

    def delete_teacher(self, teacher_id: str) -> bool:
        index = self._index_of(teacher_id)
        if index is None:
            LOGGER.debug("TeacherStore.delete_teacher: unknown id=%s", teacher_id)
            return False
        self._teachers.pop(index)
        LOGGER.debug("TeacherStore.delete_teacher: id=%s", teacher_id)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _index_of(self, teacher_id: str) -> int | None:
        for index, teacher in enumerate(self._teachers):
            if teacher.id == teacher_id:
                return index
        return None

    def _validated_name(self, raw: Any) -> str:
        name = "" if raw is None else str(raw).strip()
        if not has_honorific(name, self._honorifics):
            prefixes = ", ".join(self._honorifics)
            raise ValidationError(
                message=f"Teacher name must start with one of {prefixes} followed by a name",
                field_name="name",
            )
        return name


__all__ = ["TeacherStore"]
