"""Redis cache store adapter."""

from typing import Any, Optional

from pydantic import TypeAdapter
from pydantic_core import to_json
from redis import asyncio as aioredis

from autofinder.application.ports.cache_store import CacheStore
from autofinder.infrastructure.logging.logger import logger


class RedisCacheStore(CacheStore):
    """Redis cache store. Values are stored as JSON and expire through SETEX.

    Every failure is logged and treated as a miss or a no-op.
    """

    KEY_PREFIX = "autofinder:cache:"

    def __init__(self, redis_url: str) -> None:
        """
        Initialize Redis cache store.

        Args:
            redis_url: Redis connection URL
        """
        self._redis_url = redis_url
        self._client: Optional[aioredis.Redis] = None

    async def _get_client(self) -> aioredis.Redis:
        """
        Get or create Redis client.

        Returns:
            Redis client instance
        """
        if self._client is None:
            self._client = await aioredis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._client

    def _make_key(self, key: str) -> str:
        """
        Make Redis key for a cache key.

        Args:
            key: Cache key

        Returns:
            Redis key string
        """
        return f"{self.KEY_PREFIX}{key}"

    async def get(self, key: str, value_type: Any) -> Optional[Any]:
        """
        Get a cached value.

        Args:
            key: Cache key
            value_type: Type the JSON payload is validated into

        Returns:
            Cached value, or None if missing, expired or unreadable
        """
        try:
            client = await self._get_client()
            cached_data = await client.get(self._make_key(key))

            if cached_data is None:
                return None

            return TypeAdapter(value_type).validate_json(cached_data)
        except Exception as e:
            logger.warning(f"Error reading from cache for key {key}: {str(e)}")
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """
        Store a value with a time-to-live.

        Args:
            key: Cache key
            value: Value to cache (pydantic models, lists of them, or JSON-able data)
            ttl_seconds: Time-to-live in seconds
        """
        try:
            client = await self._get_client()
            payload = to_json(value, by_alias=True).decode("utf-8")
            await client.setex(self._make_key(key), ttl_seconds, payload)
        except Exception as e:
            logger.warning(f"Error writing to cache for key {key}: {str(e)}")

    async def remove_all_matching_prefix(self, prefix: str) -> None:
        """
        Remove every entry whose key starts with the prefix.

        Args:
            prefix: Key prefix
        """
        try:
            client = await self._get_client()
            keys = [key async for key in client.scan_iter(match=f"{self._make_key(prefix)}*")]
            if keys:
                await client.delete(*keys)
        except Exception as e:
            logger.warning(f"Error invalidating cache prefix {prefix}: {str(e)}")

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.close()
            self._client = None
