"""JSON export of the records shown in a list view."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Iterable

from ..utils.file_io import write_text
from ..utils.identifiers import utc_now

__all__ = ["export_filename", "export_records", "serialize_records"]

LOGGER = logging.getLogger(__name__)


def export_filename(kind: str, today: date | None = None) -> str:
    """Return ``{kind}-{YYYY-MM-DD}.json`` for ``today`` (UTC date by default)."""

    day = today or utc_now().date()
    return f"{kind}-{day.isoformat()}.json"


def serialize_records(records: Iterable[Any]) -> str:
    """Pretty-print records (models or plain mappings) as a JSON array."""

    payload = [record.to_dict() if hasattr(record, "to_dict") else dict(record) for record in records]
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def export_records(
    records: Iterable[Any],
    kind: str,
    *,
    directory: Path | str | None = None,
    path: Path | str | None = None,
    today: date | None = None,
) -> Path:
    """Write ``records`` atomically and return the file written.

    ``path`` wins over ``directory``; with neither, the current directory is
    used with the default export file name.
    """

    if path is not None:
        target = Path(path).expanduser()
    else:
        target = Path(directory or Path.cwd()).expanduser() / export_filename(kind, today)
    body = serialize_records(records)
    written = write_text(target, body)
    LOGGER.info("Exported %s to %s", kind, written)
    return written
