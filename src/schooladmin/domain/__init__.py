"""Domain stores and the coordinating data manager."""

from __future__ import annotations

from .alert_manager import AlertManager, OperationResult
from .book_store import BookStore
from .data_manager import DataManager
from .speech_store import SpeechStore
from .subject_catalog import SubjectCatalog
from .teacher_store import TeacherStore

__all__ = [
    "AlertManager",
    "BookStore",
    "DataManager",
    "OperationResult",
    "SpeechStore",
    "SubjectCatalog",
    "TeacherStore",
]
