"""Service layer helpers (settings, import/export, auth stubs)."""

from .auth import AuthResponse, LoginCredentials, login, request_password_reset
from .exporters import export_filename, export_records, serialize_records
from .importers import (
    IMPORT_KINDS,
    ImportReport,
    RecordImporter,
    ValidationResult,
    example_payload,
    validate_import,
)
from .settings import Settings, SettingsStore

__all__ = [
    "AuthResponse",
    "IMPORT_KINDS",
    "ImportReport",
    "LoginCredentials",
    "RecordImporter",
    "Settings",
    "SettingsStore",
    "ValidationResult",
    "example_payload",
    "export_filename",
    "export_records",
    "login",
    "request_password_reset",
    "serialize_records",
    "validate_import",
]
