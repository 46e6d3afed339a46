# tests/unit/cache/test_unit_json_store.py — v1
"""Tests for cache/json_store.py — one JSON file per fingerprint."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from ghcard.cache.json_store import JsonProfileStore
from ghcard.cache.models import PersistedProfile


@pytest.fixture
def store(tmp_cache_dir):
    return JsonProfileStore(cache_root=tmp_cache_dir)


class TestJsonProfileStore:
    @pytest.mark.asyncio
    async def test_put_and_get(self, store, sample_profile):
        await store.put("key1", sample_profile, 3600)
        assert await store.get("key1") == sample_profile

    @pytest.mark.asyncio
    async def test_get_missing(self, store):
        assert await store.get("nonexistent") is None

    @pytest.mark.asyncio
    async def test_delete(self, store, sample_profile, tmp_cache_dir):
        await store.put("key1", sample_profile, 3600)
        await store.delete("key1")
        assert await store.get("key1") is None
        assert not (tmp_cache_dir / "key1.json").exists()

    @pytest.mark.asyncio
    async def test_delete_missing(self, store):
        await store.delete("nonexistent")

    @pytest.mark.asyncio
    async def test_expired_removed_on_read(self, store, sample_profile, tmp_cache_dir):
        record = PersistedProfile(
            profile=sample_profile,
            expires_at=datetime.now(timezone.utc) - timedelta(seconds=1),
        )
        path = tmp_cache_dir / "old.json"
        path.write_text(record.model_dump_json(), encoding="utf-8")
        assert await store.get("old") is None
        assert not path.exists()

    @pytest.mark.asyncio
    async def test_corrupt_file(self, store, tmp_cache_dir):
        (tmp_cache_dir / "bad.json").write_text("{not json", encoding="utf-8")
        assert await store.get("bad") is None

    @pytest.mark.asyncio
    async def test_no_temp_files_left(self, store, sample_profile, tmp_cache_dir):
        await store.put("key1", sample_profile, 3600)
        assert [p.name for p in tmp_cache_dir.iterdir()] == ["key1.json"]

    @pytest.mark.asyncio
    async def test_overwrite(self, store, sample_profile):
        await store.put("key1", sample_profile, 3600)
        updated = sample_profile.model_copy(update={"languages": ()})
        await store.put("key1", updated, 3600)
        assert (await store.get("key1")).languages == ()

    @pytest.mark.asyncio
    async def test_ping(self, store):
        assert await store.ping() is True

    def test_creates_root(self, tmp_path):
        JsonProfileStore(cache_root=tmp_path / "a" / "b")
        assert (tmp_path / "a" / "b").is_dir()
