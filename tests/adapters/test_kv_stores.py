"""Unit tests for the key/value store adapters."""

from __future__ import annotations

import sqlite3
import stat

import pytest

from timelog_cli.adapters import MemoryKeyValueStore, SqliteKeyValueStore
from timelog_cli.adapters.sqlite.connection import execute_with_retry, open_connection


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path):
    if request.param == "memory":
        yield MemoryKeyValueStore()
        return
    store = SqliteKeyValueStore(tmp_path / "kv.db")
    yield store
    store.close()


class TestKeyValueContract:
    def test_missing_key(self, any_store):
        assert any_store.get_item("missing") is None

    def test_set_and_overwrite(self, any_store):
        any_store.set_item("k", "one")
        any_store.set_item("k", "two")
        assert any_store.get_item("k") == "two"

    def test_remove(self, any_store):
        any_store.set_item("k", "v")
        any_store.remove_item("k")
        assert any_store.get_item("k") is None

    def test_remove_missing_is_noop(self, any_store):
        any_store.remove_item("never-set")


class TestMemoryStore:
    def test_initial_values_are_copied(self):
        initial = {"a": "1"}
        store = MemoryKeyValueStore(initial)
        store.set_item("b", "2")
        assert initial == {"a": "1"}
        assert store.keys() == ["a", "b"]

    def test_close_is_noop(self):
        store = MemoryKeyValueStore({"a": "1"})
        store.close()
        assert store.get_item("a") == "1"


class TestSqliteStore:
    def test_persists_across_connections(self, tmp_path):
        path = tmp_path / "kv.db"
        first = SqliteKeyValueStore(path)
        first.set_item("k", '{"x": 1}')
        first.close()

        second = SqliteKeyValueStore(path)
        assert second.get_item("k") == '{"x": 1}'
        second.close()

    def test_new_database_is_private(self, tmp_path):
        path = tmp_path / "nested" / "kv.db"
        store = SqliteKeyValueStore(path)
        assert stat.S_IMODE(path.stat().st_mode) == 0o600
        store.close()

    def test_wal_mode(self, tmp_path):
        connection = open_connection(tmp_path / "kv.db")
        mode = connection.execute("PRAGMA journal_mode").fetchone()[0]
        assert mode.lower() == "wal"
        connection.close()

    def test_records_update_time(self, tmp_path):
        store = SqliteKeyValueStore(tmp_path / "kv.db")
        store.set_item("k", "v")
        row = store.connection.execute(
            "SELECT updated_at FROM kv_store WHERE key = 'k'"
        ).fetchone()
        assert row["updated_at"].endswith("+00:00")
        store.close()

    def test_default_path_uses_data_dir(self, tmp_path, monkeypatch):
        monkeypatch.setattr(
            "timelog_cli.adapters.sqlite.connection.user_data_dir",
            lambda app_name: str(tmp_path / app_name),
        )
        store = SqliteKeyValueStore()
        assert (tmp_path / "timelog_cli" / "timelog.db").exists()
        store.close()


class TestExecuteWithRetry:
    def test_retries_locked_database(self, monkeypatch):
        calls = []

        class FlakyConnection:
            def execute(self, sql, params=None):
                calls.append(sql)
                if len(calls) < 3:
                    raise sqlite3.OperationalError("database is locked")
                return "cursor"

        monkeypatch.setattr("timelog_cli.adapters.sqlite.connection.time.sleep", lambda s: None)
        assert execute_with_retry(FlakyConnection(), "SELECT 1") == "cursor"
        assert len(calls) == 3

    def test_other_errors_propagate(self):
        class BrokenConnection:
            def execute(self, sql, params=None):
                raise sqlite3.OperationalError("no such table: nope")

        with pytest.raises(sqlite3.OperationalError, match="no such table"):
            execute_with_retry(BrokenConnection(), "SELECT * FROM nope")
