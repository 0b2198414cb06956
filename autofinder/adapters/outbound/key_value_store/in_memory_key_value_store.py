"""In-memory key/value store adapter."""

from typing import Optional

from autofinder.application.ports.key_value_store import PersistentKeyValueStore


class InMemoryKeyValueStore(PersistentKeyValueStore):
    """In-memory implementation of a persisted slot. Lost at process end."""

    def __init__(self, data: Optional[bytes] = None) -> None:
        """
        Initialize in-memory store.

        Args:
            data: Initial contents
        """
        self._data = data

    async def load(self) -> Optional[bytes]:
        """Return the stored bytes."""
        return self._data

    async def save(self, data: bytes) -> None:
        """Replace the stored bytes."""
        self._data = data
