"""Database connection management for the local SQLite store.

Connections are opened per store instance (no process-wide singleton) with
WAL mode and a generous lock timeout, so a background ``watch`` loop and a
one-shot command can share the same file.
"""

from __future__ import annotations

import os
import sqlite3
import time
from pathlib import Path

from platformdirs import user_data_dir

_APP_NAME = "timelog_cli"
_DB_FILE = "timelog.db"

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""


def default_db_path() -> Path:
    """Default database location inside the user data dir."""
    return Path(user_data_dir(_APP_NAME)) / _DB_FILE


def open_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Open and configure a connection, creating the schema if needed.

    Args:
        db_path: Path to database file. If None, uses default location.

    Returns:
        sqlite3.Connection configured for the key/value store
    """
    db_path = default_db_path() if db_path is None else Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    is_new_database = not db_path.exists()

    connection = sqlite3.connect(
        str(db_path),
        check_same_thread=False,  # The watch loop may run off the main thread
        timeout=30.0,  # Wait up to 30s for locks
    )
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA journal_mode = WAL")

    if is_new_database:
        os.chmod(db_path, 0o600)

    with connection:
        connection.execute(SCHEMA)

    return connection


def execute_with_retry(
    connection: sqlite3.Connection,
    sql: str,
    params: tuple | dict | None = None,
    max_retries: int = 3,
) -> sqlite3.Cursor:
    """Execute SQL, retrying when the database is locked.

    Raises:
        sqlite3.OperationalError: If database remains locked after retries
    """
    for attempt in range(max_retries):
        try:
            if params:
                return connection.execute(sql, params)
            return connection.execute(sql)
        except sqlite3.OperationalError as e:
            if "database is locked" in str(e) and attempt < max_retries - 1:
                # Exponential backoff: 0.1s, 0.2s, 0.4s
                time.sleep(0.1 * (2**attempt))
                continue
            raise

    raise sqlite3.OperationalError("Max retries exceeded")
