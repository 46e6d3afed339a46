# tests/unit/cache/test_cache_factory.py — v4
"""Tests for cache/cache_factory.py."""

from __future__ import annotations

import pytest

from ghcard.cache.cache_factory import create_profile_store
from ghcard.cache.json_store import JsonProfileStore
from ghcard.cache.sqlite_store import SqliteProfileStore
from ghcard.config.settings import Settings


class TestCreateProfileStore:
    def test_no_settings(self):
        assert create_profile_store() is None

    def test_default_none(self):
        assert create_profile_store(Settings(_env_file=None)) is None

    def test_json_backend(self, tmp_path):
        s = Settings(_env_file=None, cache_backend="json", cache_root=tmp_path)
        assert isinstance(create_profile_store(s), JsonProfileStore)

    @pytest.mark.asyncio
    async def test_sqlite_backend(self, tmp_path):
        s = Settings(_env_file=None, cache_backend="sqlite", cache_root=tmp_path)
        store = create_profile_store(s)
        try:
            assert isinstance(store, SqliteProfileStore)
            assert (tmp_path / "ghcard_profiles.db").exists()
        finally:
            await store.close()

    def test_redis_backend(self):
        pytest.importorskip("redis")
        from ghcard.cache.redis_store import RedisProfileStore
        s = Settings(
            _env_file=None, cache_backend="redis", cache_redis_url="redis://localhost:6379/0"
        )
        assert isinstance(create_profile_store(s), RedisProfileStore)

    def test_redis_missing_url(self):
        s = Settings(_env_file=None).model_copy(update={"cache_backend": "redis"})
        with pytest.raises(ValueError, match="CACHE_REDIS_URL"):
            create_profile_store(s)

    def test_unsupported_backend(self):
        s = Settings(_env_file=None).model_copy(update={"cache_backend": "memcached"})
        with pytest.raises(ValueError, match="Unsupported"):
            create_profile_store(s)
