"""Logging setup for the school admin package.

One rotating log file under ``~/.schooladmin/logs`` (or ``SCHOOLADMIN_LOG_DIR``)
plus an optional stderr handler, both using the same pipe-separated format.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from pathlib import Path

__all__ = ["LOG_FORMAT", "setup_logging", "get_log_path", "shutdown_logging"]

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_FILENAME = "schooladmin.log"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_DEFAULT_LOG_DIR = Path.home() / ".schooladmin" / "logs"
_QUIET_LOGGERS: tuple[str, ...] = ("jsonschema", "urllib3")

_installed: list[logging.Handler] = []
_log_path: Path | None = None


def setup_logging(
    level: int = logging.INFO,
    *,
    log_dir: Path | str | None = None,
    console: bool = True,
    max_bytes: int = 512_000,
    backup_count: int = 2,
    force: bool = False,
) -> Path:
    """Install the file (and console) handlers on the root logger.

    Repeated calls are no-ops unless ``force`` is set, in which case the
    previously installed handlers are closed and replaced.
    """

    global _log_path
    if _installed and not force and _log_path is not None:
        return _log_path
    shutdown_logging()

    directory = Path(log_dir or os.environ.get("SCHOOLADMIN_LOG_DIR") or _DEFAULT_LOG_DIR).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / LOG_FILENAME

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=_DATE_FORMAT)
    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))

    root = logging.getLogger()
    root.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    _installed.extend(handlers)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    _log_path = path
    return path


def get_log_path() -> Path | None:
    """Return the active log file, or None before :func:`setup_logging` runs."""

    return _log_path


def shutdown_logging() -> None:
    """Detach and close the handlers installed by :func:`setup_logging`."""

    global _log_path
    root = logging.getLogger()
    while _installed:
        handler = _installed.pop()
        root.removeHandler(handler)
        handler.close()
    _log_path = None
