# src/logging/logger.py — v3
"""Logger factory with JSON and text formatters.

Both formatters stamp records with their creation time (UTC) and attach the
request context set by the cache (``subject``, ``cache_key``).
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TextIO

from ghcard.logging.context import get_context

ROOT_LOGGER = "ghcard"


def _created_at(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class JsonFormatter(logging.Formatter):
    """One JSON object per line; context fields sit beside the message."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": _created_at(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **get_context().as_dict(),
        }
        data = getattr(record, "data", None)
        if data:
            entry["data"] = data
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """``time [LEVEL] logger [subject] (key prefix) - message``"""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        line = f"{_created_at(record):%Y-%m-%d %H:%M:%S} [{record.levelname:8s}] {record.name}"
        if ctx.subject:
            line += f" [{ctx.subject}]"
        if ctx.cache_key:
            line += f" ({ctx.cache_key[:12]})"
        line += f" - {record.getMessage()}"
        if record.exc_info and record.exc_info[1] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def get_logger(name: str) -> logging.Logger:
    """Get a named logger under the ghcard root."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
    log_file: Path | str | None = None,
    rotation: str = "10MB",
    retention: int = 30,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the ghcard logger tree.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        log_format: "json" for one object per line, anything else for text.
        log_file: Optional rotating file sink, in addition to the console.
        rotation: Max file size before rotation (e.g. "10MB").
        retention: Number of rotated files to keep.
        stream: Console stream, stderr by default.

    Returns:
        The configured ``ghcard`` logger.
    """
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    # Re-init replaces handlers instead of stacking them
    root.handlers.clear()

    formatter = JsonFormatter() if log_format == "json" else TextFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        from ghcard.logging.handlers import create_rotating_handler

        handlers.append(
            create_rotating_handler(log_file, rotation=rotation, retention=retention)
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # httpx logs every request at INFO
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return root
