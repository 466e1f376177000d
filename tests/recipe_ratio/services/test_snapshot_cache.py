"""Tests for snapshot caching over Redis and the in-process fallback."""

from __future__ import annotations

import json

import pytest

from recipe_ratio.cache import (
    CacheClient,
    SnapshotCache,
    local_cache_get,
    local_cache_set,
    snapshot_key,
)
from tests.support import make_snapshot


class InMemoryRedis:
    """Lightweight async Redis double used for cache client tests."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}
        self.ttl: dict[str, int | None] = {}

    async def get(self, key: str) -> str | None:
        return self._store.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> None:
        self._store[key] = value
        self.ttl[key] = ex

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self._store.pop(key, None)


class BrokenRedis(InMemoryRedis):
    async def get(self, key: str) -> str | None:
        raise ConnectionError("redis went away")


@pytest.mark.asyncio
async def test_snapshot_round_trips_through_redis(clean_local_cache: None) -> None:
    redis = InMemoryRedis()
    cache = SnapshotCache(CacheClient(redis), ttl_seconds=120)

    await cache.write(make_snapshot(recipe_id=11))

    assert redis.ttl[snapshot_key(11)] == 120
    cached = await cache.read(11)
    assert cached == make_snapshot(recipe_id=11)


@pytest.mark.asyncio
async def test_local_fallback_used_without_redis(clean_local_cache: None) -> None:
    cache = SnapshotCache(ttl_seconds=60)

    await cache.write(make_snapshot(recipe_id=12))

    assert await local_cache_get(snapshot_key(12)) is not None
    assert (await cache.read(12)).name == "Pancakes"


@pytest.mark.asyncio
async def test_zero_ttl_disables_cache(clean_local_cache: None) -> None:
    cache = SnapshotCache(ttl_seconds=0)

    await cache.write(make_snapshot(recipe_id=13))

    assert await cache.read(13) is None


@pytest.mark.asyncio
async def test_unidentified_snapshot_is_not_cached(clean_local_cache: None) -> None:
    redis = InMemoryRedis()
    cache = SnapshotCache(CacheClient(redis))

    await cache.write(make_snapshot(recipe_id=None))

    assert redis.ttl == {}


@pytest.mark.asyncio
async def test_invalidate_clears_both_layers(clean_local_cache: None) -> None:
    redis = InMemoryRedis()
    await redis.set(snapshot_key(14), json.dumps(make_snapshot(recipe_id=14).model_dump(mode="json")))
    await local_cache_set(snapshot_key(14), {"name": "stale"})
    cache = SnapshotCache(CacheClient(redis))

    await cache.invalidate(14)

    assert await redis.get(snapshot_key(14)) is None
    assert await local_cache_get(snapshot_key(14)) is None


@pytest.mark.asyncio
async def test_malformed_payload_is_discarded(clean_local_cache: None) -> None:
    await local_cache_set(snapshot_key(15), {"unexpected": True})
    cache = SnapshotCache()

    assert await cache.read(15) is None
    assert await local_cache_get(snapshot_key(15)) is None


@pytest.mark.asyncio
async def test_redis_connection_errors_degrade_to_miss(clean_local_cache: None) -> None:
    cache = SnapshotCache(CacheClient(BrokenRedis()))

    assert await cache.read(16) is None
