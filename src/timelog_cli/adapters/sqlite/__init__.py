"""SQLite adapter module - Local database storage implementation."""

from timelog_cli.adapters.sqlite.connection import default_db_path, open_connection
from timelog_cli.adapters.sqlite.kv_store import SqliteKeyValueStore

__all__ = [
    "SqliteKeyValueStore",
    "default_db_path",
    "open_connection",
]
