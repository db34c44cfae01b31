"""Settings dataclass and JSON persistence helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from ..models.teacher import DEFAULT_HONORIFICS
from ..utils.file_io import write_json

__all__ = [
    "Settings",
    "SettingsStore",
    "DEFAULT_SETTINGS_PATH",
]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".schooladmin"
DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_VERSION = 1
_ENV_OVERRIDES: Mapping[str, str] = {
    "SCHOOLADMIN_EXPORT_DIR": "export_dir",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "SCHOOLADMIN_DEBUG_LOGGING": "debug_logging",
    "SCHOOLADMIN_SEED_DEMO_DATA": "seed_demo_data",
}
_INT_ENV_OVERRIDES: Mapping[str, str] = {
    "SCHOOLADMIN_PAGE_SIZE": "page_size",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_MIN_PAGE_SIZE = 1
_MAX_PAGE_SIZE = 200


@dataclass(slots=True)
class Settings:
    """User-configurable settings persisted between sessions."""

    page_size: int = 10
    teacher_honorifics: list[str] = field(default_factory=lambda: list(DEFAULT_HONORIFICS))
    export_dir: str | None = None
    seed_demo_data: bool = True
    debug_logging: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def honorifics(self) -> tuple[str, ...]:
        """Accepted teacher name prefixes as an immutable tuple."""
        tokens = tuple(token.strip() for token in self.teacher_honorifics if token and token.strip())
        return tokens or DEFAULT_HONORIFICS

    @property
    def effective_page_size(self) -> int:
        """Page size clamped into a sane range."""
        try:
            value = int(self.page_size)
        except (TypeError, ValueError):
            value = 10
        return max(_MIN_PAGE_SIZE, min(value, _MAX_PAGE_SIZE))

    def resolved_export_dir(self) -> Path:
        return Path(self.export_dir).expanduser() if self.export_dir else Path.cwd()


class SettingsStore:
    """Persistence adapter for :class:`Settings`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or DEFAULT_SETTINGS_PATH

    @property
    def path(self) -> Path:
        """Return the resolved path backing this store."""

        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Load settings from disk, applying CLI/environment overrides when present."""

        payload = self._read_payload()
        settings = Settings()
        if payload:
            data = _filter_fields(payload)
            honorifics = data.get("teacher_honorifics")
            if honorifics is not None and not isinstance(honorifics, list):
                LOGGER.warning("Ignoring non-list teacher_honorifics in %s", self._path)
                data.pop("teacher_honorifics")
            try:
                settings = Settings(**data)
            except TypeError as exc:
                LOGGER.warning("Settings payload contained unexpected data: %s", exc)
                settings = Settings()
            LOGGER.debug("Settings loaded from %s: %s", self._path, sorted(data))

        if overrides:
            settings = self._apply_overrides(settings, overrides, source="CLI")

        return self._apply_env_overrides(settings)

    def save(self, settings: Settings) -> Path:
        """Persist settings to disk with atomic file writes."""

        payload = asdict(settings)
        payload["version"] = _SETTINGS_VERSION
        write_json(self._path, payload, sort_keys=True)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _read_payload(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
            payload = json.loads(text)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s does not hold a JSON object", self._path)
            return {}
        return payload

    def _apply_overrides(
        self,
        settings: Settings,
        overrides: Mapping[str, Any],
        *,
        source: str = "runtime",
    ) -> Settings:
        allowed = {field.name for field in fields(Settings)}
        filtered: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in allowed or value is None:
                continue
            filtered[key] = value
        metadata_override = filtered.get("metadata")
        if isinstance(metadata_override, Mapping):
            merged_metadata = dict(settings.metadata or {})
            merged_metadata.update(metadata_override)
            filtered["metadata"] = merged_metadata
        if filtered:
            LOGGER.debug("Applying %s settings overrides: %s", source, sorted(filtered))
            settings = replace(settings, **filtered)
        return settings

    def _apply_env_overrides(self, settings: Settings) -> Settings:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in _ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        for env_name, field_name in _INT_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            try:
                overrides[field_name] = int(value, 10)
            except ValueError:
                LOGGER.warning(
                    "Environment override %s=%s is not a valid integer",
                    env_name,
                    value,
                )
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="environment")
        return settings


def _filter_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {field.name for field in fields(Settings)}
    return {key: value for key, value in payload.items() if key in allowed}
