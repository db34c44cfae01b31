"""Utility helpers shared across the school admin package."""

from __future__ import annotations

from .file_io import read_text, write_json, write_text
from .identifiers import BookCodeSequence, epoch_millis, new_id, utc_now

__all__ = [
    "BookCodeSequence",
    "epoch_millis",
    "new_id",
    "read_text",
    "utc_now",
    "write_json",
    "write_text",
]
