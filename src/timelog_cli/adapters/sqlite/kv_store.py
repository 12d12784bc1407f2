"""SQLite implementation of the key/value store."""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime
from pathlib import Path

from timelog_cli.adapters.base import KeyValueStore
from timelog_cli.adapters.sqlite.connection import execute_with_retry, open_connection


class SqliteKeyValueStore(KeyValueStore):
    """Key/value pairs in a single ``kv_store`` table."""

    def __init__(
        self,
        db_path: str | Path | None = None,
        connection: sqlite3.Connection | None = None,
    ):
        self.connection = connection or open_connection(db_path)

    def get_item(self, key: str) -> str | None:
        row = execute_with_retry(
            self.connection, "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def set_item(self, key: str, value: str) -> None:
        with self.connection:
            execute_with_retry(
                self.connection,
                """
                INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, datetime.now(UTC).isoformat()),
            )

    def remove_item(self, key: str) -> None:
        with self.connection:
            execute_with_retry(
                self.connection, "DELETE FROM kv_store WHERE key = ?", (key,)
            )

    def close(self) -> None:
        self.connection.close()
