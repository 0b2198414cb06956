"""In-memory cache store adapter."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from autofinder.application.ports.cache_store import CacheStore


@dataclass
class CacheEntry:
    """Cached value with its absolute expiration."""

    value: Any
    expires_at: datetime
    hit_count: int = 0

    def is_expired(self, now: datetime) -> bool:
        """Check if the entry expired at the given instant."""
        return now >= self.expires_at


class InMemoryCacheStore(CacheStore):
    """In-memory implementation of cache store with per-entry TTL.

    Expired entries are dropped when looked up and swept on every write.
    """

    def __init__(self) -> None:
        """Initialize in-memory cache store."""
        self._storage: dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0

    async def get(self, key: str, value_type: Any = None) -> Optional[Any]:
        """
        Get a cached value.

        Args:
            key: Cache key
            value_type: Ignored; values are kept as Python objects

        Returns:
            Cached value, or None if missing or expired
        """
        entry = self._storage.get(key)
        if entry is None:
            self._misses += 1
            return None

        if entry.is_expired(datetime.now(timezone.utc)):
            del self._storage[key]
            self._misses += 1
            return None

        entry.hit_count += 1
        self._hits += 1
        return entry.value

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """
        Store a value with a time-to-live.

        Args:
            key: Cache key
            value: Value to cache
            ttl_seconds: Time-to-live in seconds
        """
        self.purge_expired()
        self._storage[key] = CacheEntry(
            value=value,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds),
        )

    async def remove_all_matching_prefix(self, prefix: str) -> None:
        """
        Remove every entry whose key starts with the prefix.

        Args:
            prefix: Key prefix
        """
        for key in [key for key in self._storage if key.startswith(prefix)]:
            del self._storage[key]

    def purge_expired(self) -> int:
        """
        Drop every expired entry.

        Returns:
            Number of entries removed
        """
        now = datetime.now(timezone.utc)
        expired = [key for key, entry in self._storage.items() if entry.is_expired(now)]
        for key in expired:
            del self._storage[key]
        return len(expired)

    async def remove(self, key: str) -> None:
        """Remove one entry."""
        self._storage.pop(key, None)

    async def clear(self) -> None:
        """Remove every entry and reset the counters."""
        self._storage.clear()
        self._hits = 0
        self._misses = 0

    async def contains(self, key: str) -> bool:
        """Check if a non-expired entry exists, without counting a lookup."""
        entry = self._storage.get(key)
        return entry is not None and not entry.is_expired(datetime.now(timezone.utc))

    @property
    def size(self) -> int:
        """Number of stored entries, expired ones included until looked up or swept."""
        return len(self._storage)

    @property
    def hit_rate(self) -> float:
        """Share of lookups served from the cache."""
        total = self._hits + self._misses
        return self._hits / total if total else 0.0
