"""Recent query log use case."""

from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from pydantic import TypeAdapter, ValidationError

from autofinder.application.dtos.recent_query import RecentQuery
from autofinder.application.observable import Observable, Unsubscribe
from autofinder.application.ports.key_value_store import PersistentKeyValueStore
from autofinder.infrastructure.logging.logger import logger

DEFAULT_MAX_ENTRIES = 20

_entries_adapter = TypeAdapter(list[RecentQuery])


class RecentQueryLog:
    """Bounded, most-recent-first list of past queries, persisted after every change.

    Persistence failures never reach the caller: the in-memory list stays
    authoritative for the session.
    """

    def __init__(
        self,
        store: PersistentKeyValueStore,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        entries: Optional[list[RecentQuery]] = None,
    ) -> None:
        """
        Initialize recent query log.

        Use ``RecentQueryLog.open`` to start from the persisted entries.

        Args:
            store: Store holding the serialized log
            max_entries: Maximum number of entries kept
            entries: Initial entries, most recent first
        """
        self._store = store
        self._max_entries = max_entries
        self._entries: list[RecentQuery] = list(entries or [])[:max_entries]
        self._observable: Observable[list[RecentQuery]] = Observable("recent_query_log")

    @classmethod
    async def open(
        cls, store: PersistentKeyValueStore, max_entries: int = DEFAULT_MAX_ENTRIES
    ) -> "RecentQueryLog":
        """
        Create a log loaded from the store.

        A missing or unreadable payload leaves the log empty.

        Args:
            store: Store holding the serialized log
            max_entries: Maximum number of entries kept

        Returns:
            RecentQueryLog instance
        """
        entries: list[RecentQuery] = []
        try:
            data = await store.load()
            if data:
                entries = _entries_adapter.validate_json(data)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable recent query log: {str(e)}")
        except Exception as e:
            logger.warning(f"Error loading recent query log: {str(e)}")
        return cls(store, max_entries=max_entries, entries=entries)

    @property
    def entries(self) -> list[RecentQuery]:
        """Copy of the entries, most recent first."""
        return list(self._entries)

    def subscribe(self, listener: Callable[[list[RecentQuery]], None]) -> Unsubscribe:
        """
        Register a listener called with the entries after every mutation.

        Args:
            listener: Callable receiving the list of entries

        Returns:
            Unsubscribe callable
        """
        return self._observable.subscribe(listener)

    async def add(self, query: str, result_count: int = 0) -> None:
        """
        Record a query at the front of the log.

        Blank queries are ignored. An existing entry with the same text is moved
        to the front instead of duplicated.

        Args:
            query: Query text
            result_count: Number of loaded results at the time of the search
        """
        trimmed = query.strip()
        if not trimmed:
            return

        entries = [entry for entry in self._entries if entry.query != trimmed]
        entries.insert(
            0,
            RecentQuery(
                query=trimmed,
                timestamp=datetime.now(timezone.utc),
                result_count=result_count,
            ),
        )
        self._entries = entries[: self._max_entries]
        await self._persist()

    async def clear(self) -> None:
        """Remove every entry."""
        self._entries = []
        await self._persist()

    async def remove_at(self, indices: Iterable[int]) -> None:
        """
        Remove entries by position. Out-of-range positions are ignored.

        Args:
            indices: Positions to remove
        """
        doomed = set(indices)
        self._entries = [entry for i, entry in enumerate(self._entries) if i not in doomed]
        await self._persist()

    async def _persist(self) -> None:
        """Save the entries and notify listeners."""
        try:
            await self._store.save(_entries_adapter.dump_json(self._entries))
        except Exception as e:
            logger.warning(f"Error saving recent query log: {str(e)}")
        self._observable.notify(self.entries)
