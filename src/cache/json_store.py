# src/cache/json_store.py — v2
"""JSON file-based profile store (CACHE_BACKEND=json).

One file per fingerprint under CACHE_ROOT. Expired files are removed when
read.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

from pydantic import ValidationError

from ghcard.cache.base_cache_store import BaseProfileStore
from ghcard.cache.models import PersistedProfile
from ghcard.profile.models import Profile

logger = logging.getLogger(__name__)


class JsonProfileStore(BaseProfileStore):
    """File-based profile store using JSON files."""

    def __init__(self, cache_root: Path | str) -> None:
        self._root = Path(cache_root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    async def get(self, key: str) -> Profile | None:
        path = self._entry_path(key)
        if not path.exists():
            return None
        try:
            record = PersistedProfile.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning("Failed to read cached profile %s: %s", key, e)
            return None
        if record.expires_at <= datetime.now(timezone.utc):
            path.unlink(missing_ok=True)
            return None
        return record.profile

    async def put(self, key: str, profile: Profile, ttl_seconds: int) -> None:
        record = PersistedProfile(
            profile=profile,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds),
        )
        path = self._entry_path(key)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(record.model_dump_json(), encoding="utf-8")
        tmp.replace(path)

    async def delete(self, key: str) -> None:
        self._entry_path(key).unlink(missing_ok=True)

    async def ping(self) -> bool:
        return self._root.is_dir()

    def _entry_path(self, key: str) -> Path:
        """Return file path for a cache key."""
        safe_key = key.replace("/", "_").replace("\\", "_")
        return self._root / f"{safe_key}.json"
