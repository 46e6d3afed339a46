# src/logging/context.py — v2
"""Contextual logging support: attach subject and cache_key to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per profile request.
_subject: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "subject", default=None
)
_cache_key: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "cache_key", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    subject: str | None = None
    cache_key: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(subject=_subject.get(), cache_key=_cache_key.get())


def set_request_context(subject: str, cache_key: str | None = None) -> None:
    """Set request-level context (called once per profile lookup).

    Tasks copy the context at creation, so a background revalidation keeps
    logging under the subject that spawned it.
    """
    _subject.set(subject)
    _cache_key.set(cache_key)


def clear_context() -> None:
    """Reset all context variables."""
    _subject.set(None)
    _cache_key.set(None)
