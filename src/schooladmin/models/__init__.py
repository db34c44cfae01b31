"""Plain data records shared by the stores, importers and exporters."""

from __future__ import annotations

from .alert import (
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
from .book import BOOK_TYPES, GRADES, UNKNOWN, Book, BookDraft, Subject
from .speech import SPEECH_STATUSES, Speech, SpeechDraft
from .teacher import DEFAULT_HONORIFICS, Teacher, TeacherDraft

__all__ = [
    "ALERT_CATEGORIES",
    "ALERT_PRIORITIES",
    "ALERT_STATUSES",
    "ALERT_TYPES",
    "BOOK_TYPES",
    "DEFAULT_HONORIFICS",
    "GRADES",
    "SPEECH_STATUSES",
    "TARGET_AUDIENCES",
    "UNKNOWN",
    "Alert",
    "AlertAttachment",
    "AlertFilter",
    "AlertForm",
    "AlertStats",
    "Book",
    "BookDraft",
    "Speech",
    "SpeechDraft",
    "Subject",
    "Teacher",
    "TeacherDraft",
]
