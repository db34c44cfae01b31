"""Demo records loaded into a fresh session when ``seed_demo_data`` is enabled."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from .models.alert import Alert
from .models.book import Book, Subject
from .models.speech import Speech
from .models.teacher import Teacher

__all__ = ["DemoData", "demo_data", "demo_subjects"]


@dataclass(slots=True)
class DemoData:
    subjects: tuple[Subject, ...] = ()
    teachers: tuple[Teacher, ...] = ()
    books: tuple[Book, ...] = ()
    speeches: tuple[Speech, ...] = ()
    alerts: tuple[Alert, ...] = field(default_factory=tuple)


def demo_subjects() -> tuple[Subject, ...]:
    names = (
        "Math",
        "Physics",
        "Chemistry",
        "English",
        "Arabic",
        "Kurdish",
        "History",
        "Geography",
        "Biology",
        "Art",
    )
    return tuple(Subject(id=str(index), name=name) for index, name in enumerate(names, start=1))


def _teachers(subjects: tuple[Subject, ...]) -> tuple[Teacher, ...]:
    by_id = {subject.id: subject for subject in subjects}
    rows = (
        ("1", "Dr. Ahmed Mohammed", "1", "2024-01-10"),
        ("2", "Ms. Fatima Ali", "2", "2024-01-12"),
        ("3", "Dr. Karwan Hassan", "3", "2024-01-15"),
        ("4", "Ms. Zhian Ibrahim", "4", "2024-01-18"),
        ("5", "Dr. Sara Mahmoud", "5", "2024-01-20"),
    )
    return tuple(
        Teacher(id=teacher_id, name=name, subject=by_id[subject_id].name, subject_id=subject_id, date_added=added)
        for teacher_id, name, subject_id, added in rows
    )


def _books() -> tuple[Book, ...]:
    rows = (
        ("Mathematics for Grade 12", "example.com/math-12.pdf", "Math", "Mr. Ahmed Mohammed", "Grade 12", "book", 1640995200000, 245, 89, "2024-01-15"),
        ("Physics", "www.example.com/physics-modern.pdf", "Physics", "Dr. Karwan Hassan", "Grade 11", "booklet", 1640995800000, 189, 67, "2024-01-20"),
        ("Chemistry", "https://example.com/organic-chemistry.pdf", "Chemistry", "Mr. Sara Mahmoud", "Grade 10", "booklet", 1640996400000, 156, 45, "2024-02-01"),
        ("English", "docs.google.com/document/english-grammar", "English", "Ms. Zhian Ibrahim", "Grade 9", "book", 1640997000000, 298, 112, "2024-02-05"),
        ("History", "archive.org/details/kurdistan-history", "History", "Mr. Dler Qadir", "Grade 8", "book", 1640997600000, 134, 78, "2024-02-10"),
    )
    return tuple(
        Book(
            id=str(index),
            book_id=f"BOOK-{index:03d}",
            title=title,
            url=url,
            image="unknown",
            subject_name=subject,
            teacher_name=teacher,
            grade=grade,
            book_type=book_type,
            time_clicked=clicked,
            click_count=clicks,
            favorites_count=favorites,
            date_added=added,
        )
        for index, (title, url, subject, teacher, grade, book_type, clicked, clicks, favorites, added) in enumerate(rows, start=1)
    )


def _speeches() -> tuple[Speech, ...]:
    return (
        Speech(
            id="1",
            title="Welcome back",
            content="A warm welcome to every student starting the new term.",
            scheduled_date="2024-09-01",
            status="published",
            created_at=datetime(2024, 8, 25, 9, 0, tzinfo=timezone.utc),
        ),
        Speech(
            id="2",
            title="Exam week",
            content="Final exams begin on Monday. Please arrive fifteen minutes early.",
            scheduled_date="2024-12-15",
            status="scheduled",
            created_at=datetime(2024, 12, 1, 9, 0, tzinfo=timezone.utc),
        ),
    )


def _alerts() -> tuple[Alert, ...]:
    return (
        Alert(
            id="1",
            title="System update",
            message="The system will be updated on Friday at 5 PM.",
            type="info",
            priority="medium",
            target_audience="all",
            category="maintenance",
            status="active",
            created_at=datetime(2024, 7, 20, 10, 0, tzinfo=timezone.utc),
            updated_at=datetime(2024, 7, 20, 10, 0, tzinfo=timezone.utc),
            created_by="admin",
        ),
        Alert(
            id="2",
            title="Emergency maintenance",
            message="Emergency maintenance on the main servers is in progress.",
            type="error",
            priority="urgent",
            target_audience="staff",
            category="maintenance",
            status="active",
            created_at=datetime(2024, 7, 25, 14, 0, tzinfo=timezone.utc),
            updated_at=datetime(2024, 7, 25, 14, 0, tzinfo=timezone.utc),
            created_by="admin",
            is_sticky=True,
            show_on_login=True,
        ),
    )


def demo_data() -> DemoData:
    """Return a fresh, independent set of demo records."""
    subjects = demo_subjects()
    return DemoData(
        subjects=subjects,
        teachers=_teachers(subjects),
        books=_books(),
        speeches=_speeches(),
        alerts=_alerts(),
    )
