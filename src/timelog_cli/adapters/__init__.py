"""Adapters module - key/value store implementations.

This package contains concrete implementations of the ``KeyValueStore`` port:
- sqlite: Local SQLite database storage
- memory: In-process dictionary storage
"""

from .base import KeyValueStore
from .memory import MemoryKeyValueStore
from .sqlite import SqliteKeyValueStore

__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqliteKeyValueStore",
]
