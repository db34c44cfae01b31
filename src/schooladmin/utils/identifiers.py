"""Identifier and timestamp helpers shared by the stores."""

from __future__ import annotations

import re
import secrets
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable

__all__ = [
    "BOOK_CODE_PREFIX",
    "BookCodeSequence",
    "Clock",
    "epoch_millis",
    "new_id",
    "short_token",
    "utc_now",
]

BOOK_CODE_PREFIX = "BOOK-"
_BOOK_CODE_PATTERN = re.compile(rf"^{BOOK_CODE_PREFIX}(\d+)$")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current aware UTC time."""
    return datetime.now(timezone.utc)


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def new_id() -> str:
    """Return a globally unique opaque identifier."""
    return uuid.uuid4().hex


def short_token(length: int = 9) -> str:
    """Return a short random lowercase token for synthetic ids."""
    alphabet = "abcdefghijklmnopqrstuvwxyz0123456789"
    return "".join(secrets.choice(alphabet) for _ in range(length))


class BookCodeSequence:
    """Monotonic generator for ``BOOK-NNN`` display codes.

    The counter is independent of the collection size, so a code is never
    reissued after a deletion.
    """

    __slots__ = ("_last",)

    def __init__(self, start_after: int = 0) -> None:
        self._last = max(0, int(start_after))

    @classmethod
    def continuing(cls, existing_codes: Iterable[str]) -> BookCodeSequence:
        """Start after the highest well-formed code in ``existing_codes``."""
        highest = 0
        for code in existing_codes:
            match = _BOOK_CODE_PATTERN.match(code or "")
            if match:
                highest = max(highest, int(match.group(1)))
        return cls(start_after=highest)

    def next_code(self) -> str:
        self._last += 1
        return f"{BOOK_CODE_PREFIX}{self._last:03d}"
