# src/cache/redis_store.py — v2
"""Redis-based cache store (CACHE_BACKEND=redis).

Requires 'redis' package: pip install redis.
Suitable for multi-instance deployments sharing one cache. Keys carry no
TTL; validity is checked at read time like every other backend.
"""

from __future__ import annotations

import logging

from nexora_ai.cache.base_cache_store import BaseCacheStore
from nexora_ai.cache.models import CacheEntry

logger = logging.getLogger(__name__)

_KEY_PREFIX = "nexora_ai:cache:"


class RedisCacheStore(BaseCacheStore):
    """Redis-backed cache store."""

    def __init__(self, redis_url: str) -> None:
        try:
            import redis.asyncio as aioredis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        self._client = aioredis.Redis.from_url(redis_url, decode_responses=True)

    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve cache entry by key."""
        data = await self._client.get(f"{_KEY_PREFIX}{key}")
        if data is None:
            return None
        try:
            return CacheEntry.model_validate_json(data)
        except Exception as e:
            logger.warning("Failed to deserialize cache entry %s: %s", key, e)
            return None

    async def put(self, key: str, entry: CacheEntry) -> None:
        """Store a cache entry."""
        await self._client.set(f"{_KEY_PREFIX}{key}", entry.model_dump_json())

    async def delete(self, key: str) -> None:
        """Remove a cache entry."""
        await self._client.delete(f"{_KEY_PREFIX}{key}")

    async def close(self) -> None:
        """Close the Redis connection."""
        await self._client.aclose()
