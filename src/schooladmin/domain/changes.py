"""Helpers for turning drafts or partial mappings into field updates."""

from __future__ import annotations

import logging
from dataclasses import fields, is_dataclass
from typing import Any, Mapping

LOGGER = logging.getLogger(__name__)


def collect_changes(
    changes: Any,
    editable: tuple[str, ...],
    *,
    owner: str,
) -> dict[str, Any]:
    """Return the editable field values carried by ``changes``.

    ``changes`` is either a draft dataclass (every editable field is taken) or a
    mapping of field names (partial update). Keys outside ``editable``,
    including identity fields, are dropped.
    """

    if is_dataclass(changes) and not isinstance(changes, type):
        return {f.name: getattr(changes, f.name) for f in fields(changes) if f.name in editable}

    if not isinstance(changes, Mapping):
        raise TypeError(f"{owner} changes must be a draft or a mapping, not {type(changes).__name__}")

    values: dict[str, Any] = {}
    ignored: list[str] = []
    for key, value in changes.items():
        if key in editable:
            values[key] = value
        else:
            ignored.append(str(key))
    if ignored:
        LOGGER.debug("%s: ignoring non-editable keys %s", owner, sorted(ignored))
    return values


def is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


__all__ = ["collect_changes", "is_blank"]
