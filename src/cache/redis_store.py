# src/cache/redis_store.py — v2
"""Redis-based profile store (CACHE_BACKEND=redis).

Requires the 'redis' package. Shared by every process instance; expiry is
delegated to Redis via ``SET ... EX``.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ghcard.cache.base_cache_store import BaseProfileStore
from ghcard.profile.models import Profile

logger = logging.getLogger(__name__)

_KEY_PREFIX = "ghcard:profile:"


class RedisProfileStore(BaseProfileStore):
    """Redis-backed profile store for multi-instance deployments.

    Args:
        redis_url: Connection URL (redis:// or rediss://).
        client: Pre-built ``redis.asyncio`` client, mainly for tests.
    """

    def __init__(self, redis_url: str = "", client: Any = None) -> None:
        if client is None:
            try:
                from redis import asyncio as redis_asyncio
            except ImportError as e:
                raise ImportError(
                    "redis package required: pip install redis"
                ) from e
            client = redis_asyncio.Redis.from_url(redis_url, decode_responses=True)
        self._client = client

    async def get(self, key: str) -> Profile | None:
        data = await self._client.get(f"{_KEY_PREFIX}{key}")
        if data is None:
            return None
        try:
            return Profile.model_validate_json(data)
        except ValidationError as e:
            logger.warning("Failed to deserialize cached profile %s: %s", key, e)
            return None

    async def put(self, key: str, profile: Profile, ttl_seconds: int) -> None:
        await self._client.set(
            f"{_KEY_PREFIX}{key}", profile.model_dump_json(), ex=ttl_seconds
        )

    async def delete(self, key: str) -> None:
        await self._client.delete(f"{_KEY_PREFIX}{key}")

    async def ping(self) -> bool:
        return bool(await self._client.ping())

    async def close(self) -> None:
        """Close the Redis connection."""
        await self._client.aclose()
