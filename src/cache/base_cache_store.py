# src/cache/base_cache_store.py — v2
"""Abstract persistent profile store.

A store is an accelerator shared across processes, never the source of
truth: writes are last-writer-wins and every record carries its own expiry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ghcard.profile.models import Profile


class BaseProfileStore(ABC):
    """Unified interface for persistent profile backends."""

    @abstractmethod
    async def get(self, key: str) -> Profile | None:
        """Return the unexpired profile stored under a fingerprint."""

    @abstractmethod
    async def put(self, key: str, profile: Profile, ttl_seconds: int) -> None:
        """Store a profile that expires after ``ttl_seconds``."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a stored profile."""

    @abstractmethod
    async def ping(self) -> bool:
        """Cheap reachability probe."""

    async def close(self) -> None:
        """Release connections. No-op by default."""
