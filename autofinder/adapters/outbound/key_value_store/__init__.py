"""Persistent key/value store outbound adapters."""

from autofinder.adapters.outbound.key_value_store.file_key_value_store import FileKeyValueStore
from autofinder.adapters.outbound.key_value_store.in_memory_key_value_store import (
    InMemoryKeyValueStore,
)
from autofinder.adapters.outbound.key_value_store.sql_key_value_store import SqlKeyValueStore

__all__ = [
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "SqlKeyValueStore",
]
