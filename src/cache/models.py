# src/cache/models.py — v2
"""Cache domain models: CacheEntry, CacheMetrics, PersistedProfile."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from ghcard.profile.models import Profile

EntryState = Literal["fresh", "stale", "expired", "pending"]


@dataclass
class CacheEntry:
    """In-memory state for one fingerprint. Owned by ProfileCache.

    An entry with only ``in_flight`` set is a placeholder for a first fetch.
    """

    stale_at: float
    expires_at: float
    value: Profile | None = None
    in_flight: asyncio.Task[Profile] | asyncio.Task[Profile | None] | None = None
    revalidation_failed_at: float | None = None

    def state(self, now: float) -> EntryState:
        if self.value is None:
            return "pending"
        if now >= self.expires_at:
            return "expired"
        if now >= self.stale_at:
            return "stale"
        return "fresh"


class CacheMetrics(BaseModel):
    """Point-in-time count of entries by state."""

    total: int = 0
    fresh: int = 0
    stale: int = 0
    expired: int = 0
    pending: int = 0
    fresh_ttl_seconds: int
    stale_ttl_seconds: int


class PersistedProfile(BaseModel):
    """Record written to a persistent store."""

    profile: Profile
    expires_at: datetime
