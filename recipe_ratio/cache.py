"""Snapshot caching backed by Redis with an in-process TTL fallback.

Recipe snapshots fetched from the remote catalog stay fresh for a short window
(five minutes by default).  When Redis is reachable the payloads are shared
there; otherwise :class:`SnapshotCache` falls back to the module-level local
cache so repeated screen visits still avoid a network round-trip.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Sequence
from typing import Any

from redis.asyncio import Redis as RedisClient
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from recipe_ratio.schemas.recipe import RecipeSnapshot
from recipe_ratio.settings import DEFAULT_SNAPSHOT_CACHE_TTL_SECONDS, get_settings

logger = logging.getLogger(__name__)

_SNAPSHOT_PREFIX = "recipes:snapshot"

_local_cache: dict[str, tuple[float, Any]] = {}
_local_cache_lock = asyncio.Lock()

_redis_client: RedisClient | None = None
_client_lock = asyncio.Lock()
_redis_disabled = False


async def local_cache_get(key: str) -> Any | None:
    """Return a value from the in-process fallback cache when it remains valid."""

    async with _local_cache_lock:
        cached_entry = _local_cache.get(key)
        if cached_entry is None:
            return None

        expires_at, value = cached_entry
        if expires_at < time.time():
            _local_cache.pop(key, None)
            return None
        return value


async def local_cache_set(key: str, value: Any, ttl: int | None = None) -> None:
    """Persist ``value`` in the in-process cache while respecting the supplied TTL."""

    ttl_seconds = (
        ttl if ttl is not None and ttl > 0 else DEFAULT_SNAPSHOT_CACHE_TTL_SECONDS
    )
    async with _local_cache_lock:
        _local_cache[key] = (time.time() + ttl_seconds, value)


async def local_cache_evict(*, keys: Sequence[str]) -> None:
    async with _local_cache_lock:
        for key in keys:
            _local_cache.pop(key, None)


async def local_cache_clear_all() -> None:
    """Remove every entry from the in-process cache.

    Primarily intended for test isolation.
    """

    async with _local_cache_lock:
        _local_cache.clear()


def snapshot_key(recipe_id: int) -> str:
    return f"{_SNAPSHOT_PREFIX}:{recipe_id}"


def _is_redis_connection_error(exc: BaseException) -> bool:
    """Return ``True`` when ``exc`` represents a Redis connectivity failure."""

    return isinstance(exc, (RedisConnectionError, RedisTimeoutError, OSError))


async def get_redis() -> RedisClient | None:
    """Get Redis client, returning None if connection fails."""
    global _redis_client, _redis_disabled

    if _redis_disabled:
        logger.debug("Redis connection disabled after previous failure; skipping attempt.")
        return None

    # Acquire the lock before checking the singleton to avoid racing connects.
    async with _client_lock:
        if _redis_client is not None:
            return _redis_client

        if _redis_disabled:
            return None

        client = RedisClient.from_url(
            get_settings().redis_url, decode_responses=True, encoding="utf-8"
        )
        try:
            await client.ping()
        except Exception as exc:  # noqa: BLE001 - narrowed below
            if _is_redis_connection_error(exc):
                logger.warning(f"Redis connection failed: {exc}. Using in-process cache.")
                await client.aclose()
                _redis_disabled = True
                return None
            raise
        _redis_client = client
        logger.info("Redis connection established successfully")
        return _redis_client


async def close_redis() -> None:
    """Close the global Redis connection gracefully."""
    global _redis_client, _redis_disabled
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
    _redis_disabled = False


class CacheClient:
    """JSON get/set/delete over Redis that degrades to no-ops when offline."""

    def __init__(self, redis: RedisClient | None) -> None:
        self._redis = redis

    @property
    def available(self) -> bool:
        return self._redis is not None

    async def get_json(self, key: str) -> Any:
        if self._redis is None:
            return None
        try:
            payload = await self._redis.get(key)
            if payload is None:
                return None
            try:
                return json.loads(payload)
            except json.JSONDecodeError:
                return None
        except Exception as exc:  # noqa: BLE001 - narrowed below
            if _is_redis_connection_error(exc):
                logger.debug(f"Redis get failed for key {key}: {exc}")
                return None
            raise

    async def set_json(self, key: str, value: Any, ttl: int | None = None) -> None:
        if self._redis is None:
            return
        try:
            encoded = json.dumps(value, default=str)
            if ttl is None:
                ttl = DEFAULT_SNAPSHOT_CACHE_TTL_SECONDS
            await self._redis.set(key, encoded, ex=ttl)
        except Exception as exc:  # noqa: BLE001 - narrowed below
            if _is_redis_connection_error(exc):
                logger.debug(f"Redis set failed for key {key}: {exc}")
                return
            raise

    async def delete(self, *keys: str) -> None:
        if self._redis is None or not keys:
            return
        try:
            await self._redis.delete(*keys)
        except Exception as exc:  # noqa: BLE001 - narrowed below
            if _is_redis_connection_error(exc):
                logger.debug(f"Redis delete failed: {exc}")
                return
            raise


async def get_cache_client() -> CacheClient:
    redis = await get_redis()
    return CacheClient(redis)


class SnapshotCache:
    """Read-through storage for :class:`RecipeSnapshot` payloads."""

    def __init__(
        self,
        client: CacheClient | None = None,
        *,
        ttl_seconds: int = DEFAULT_SNAPSHOT_CACHE_TTL_SECONDS,
    ) -> None:
        self._client = client or CacheClient(None)
        self._ttl_seconds = ttl_seconds

    @property
    def enabled(self) -> bool:
        return self._ttl_seconds > 0

    async def read(self, recipe_id: int) -> RecipeSnapshot | None:
        if not self.enabled:
            return None
        key = snapshot_key(recipe_id)
        payload = await self._client.get_json(key)
        if payload is None:
            payload = await local_cache_get(key)
        if payload is None:
            return None
        try:
            return RecipeSnapshot.model_validate(payload)
        except ValueError:
            logger.warning("Discarding malformed cached snapshot for recipe %s", recipe_id)
            await self.invalidate(recipe_id)
            return None

    async def write(self, snapshot: RecipeSnapshot) -> None:
        if not self.enabled or not snapshot.has_identifier:
            return
        key = snapshot_key(snapshot.id)
        payload = snapshot.model_dump(mode="json")
        if self._client.available:
            await self._client.set_json(key, payload, ttl=self._ttl_seconds)
        else:
            await local_cache_set(key, payload, ttl=self._ttl_seconds)

    async def invalidate(self, recipe_id: int) -> None:
        key = snapshot_key(recipe_id)
        await self._client.delete(key)
        await local_cache_evict(keys=[key])


__all__ = [
    "CacheClient",
    "SnapshotCache",
    "close_redis",
    "get_cache_client",
    "get_redis",
    "local_cache_clear_all",
    "local_cache_evict",
    "local_cache_get",
    "local_cache_set",
    "snapshot_key",
]
