"""Persistent key/value store port."""

from abc import ABC, abstractmethod
from typing import Optional


class PersistentKeyValueStore(ABC):
    """Port interface for a single persisted slot of bytes."""

    @abstractmethod
    async def load(self) -> Optional[bytes]:
        """
        Load the persisted bytes.

        Returns:
            Stored bytes, or None if nothing was saved yet
        """
        pass

    @abstractmethod
    async def save(self, data: bytes) -> None:
        """
        Replace the persisted bytes.

        Args:
            data: Bytes to persist
        """
        pass
