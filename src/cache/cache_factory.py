# src/cache/cache_factory.py — v4
"""Factory for persistent profile store instantiation."""

from __future__ import annotations

from ghcard.cache.base_cache_store import BaseProfileStore
from ghcard.config.settings import Settings


def create_profile_store(settings: Settings | None = None) -> BaseProfileStore | None:
    """Instantiate the configured persistent backend.

    Args:
        settings: Application settings. None means no persistent tier.

    Returns:
        Configured store, or None for CACHE_BACKEND=none.
    """
    if settings is None or settings.cache_backend == "none":
        return None

    backend = settings.cache_backend

    if backend == "json":
        from ghcard.cache.json_store import JsonProfileStore
        return JsonProfileStore(cache_root=settings.cache_root)

    if backend == "sqlite":
        from ghcard.cache.sqlite_store import SqliteProfileStore
        db_path = settings.cache_root.expanduser() / "ghcard_profiles.db"
        return SqliteProfileStore(db_path=db_path)

    if backend == "redis":
        from ghcard.cache.redis_store import RedisProfileStore
        if not settings.cache_redis_url:
            raise ValueError(
                "CACHE_REDIS_URL must be set when CACHE_BACKEND=redis"
            )
        return RedisProfileStore(redis_url=settings.cache_redis_url)

    raise ValueError(f"Unsupported cache backend: {backend!r}")
