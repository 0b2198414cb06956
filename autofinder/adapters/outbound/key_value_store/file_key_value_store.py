"""File-backed key/value store adapter."""

from pathlib import Path
from typing import Optional

from autofinder.application.ports.key_value_store import PersistentKeyValueStore


class FileKeyValueStore(PersistentKeyValueStore):
    """Persists one slot as a file, written atomically through a temp file."""

    def __init__(self, path: str) -> None:
        """
        Initialize file store.

        Args:
            path: File path; parent directories are created on first save
        """
        self._path = Path(path)

    async def load(self) -> Optional[bytes]:
        """
        Read the file.

        Returns:
            File contents, or None if the file does not exist
        """
        if not self._path.exists():
            return None
        return self._path.read_bytes()

    async def save(self, data: bytes) -> None:
        """
        Replace the file contents.

        Args:
            data: Bytes to write
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_bytes(data)
        tmp_path.replace(self._path)
