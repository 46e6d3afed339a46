# src/cache/sqlite_store.py — v3
"""SQLite-based profile store (CACHE_BACKEND=sqlite).

Uses stdlib sqlite3, no external dependency. Expiry is stored as epoch
seconds and checked on read; expired rows are deleted lazily.
"""

from __future__ import annotations

import logging
import sqlite3
import time
from pathlib import Path

from pydantic import ValidationError

from ghcard.cache.base_cache_store import BaseProfileStore
from ghcard.profile.models import Profile

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS profiles (
    key TEXT PRIMARY KEY,
    data TEXT NOT NULL,
    expires_at REAL NOT NULL,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_profiles_expires_at ON profiles(expires_at);
"""


class SqliteProfileStore(BaseProfileStore):
    """SQLite-backed profile store for single-host deployments."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def get(self, key: str) -> Profile | None:
        cursor = self._conn.execute(
            "SELECT data, expires_at FROM profiles WHERE key = ?", (key,)
        )
        row = cursor.fetchone()
        if row is None:
            return None
        data, expires_at = row
        if expires_at <= time.time():
            await self.delete(key)
            return None
        try:
            return Profile.model_validate_json(data)
        except ValidationError as e:
            logger.warning("Failed to deserialize cached profile %s: %s", key, e)
            return None

    async def put(self, key: str, profile: Profile, ttl_seconds: int) -> None:
        """Store a profile (upsert)."""
        self._conn.execute(
            """INSERT OR REPLACE INTO profiles (key, data, expires_at)
               VALUES (?, ?, ?)""",
            (key, profile.model_dump_json(), time.time() + ttl_seconds),
        )
        self._conn.commit()

    async def delete(self, key: str) -> None:
        self._conn.execute("DELETE FROM profiles WHERE key = ?", (key,))
        self._conn.commit()

    async def ping(self) -> bool:
        self._conn.execute("SELECT 1").fetchone()
        return True

    async def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
