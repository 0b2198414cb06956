"""Cache store port."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class CacheStore(ABC):
    """Port interface for a key/value cache with per-entry expiration.

    Expiration is evaluated on ``get``. There is no size-based eviction.
    """

    @abstractmethod
    async def get(self, key: str, value_type: Any) -> Optional[Any]:
        """
        Get a cached value.

        Args:
            key: Cache key
            value_type: Expected type of the value (used by serializing stores)

        Returns:
            Cached value, or None if missing or expired
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """
        Store a value with a time-to-live.

        Args:
            key: Cache key
            value: Value to cache
            ttl_seconds: Time-to-live in seconds
        """
        pass

    @abstractmethod
    async def remove_all_matching_prefix(self, prefix: str) -> None:
        """
        Remove every entry whose key starts with the prefix.

        Args:
            prefix: Key prefix
        """
        pass

    async def close(self) -> None:
        """Release connections. Stores without any keep this no-op."""
        pass
