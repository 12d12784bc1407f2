"""Unit tests for the persistence gateway (TimerStore)."""

from __future__ import annotations

import json

import pytest

from timelog_cli.models.timer import HistoryEntry, StartTimerPayload, create_timer
from timelog_cli.services.timer_store import STORAGE_KEYS, TimerStore


@pytest.fixture()
def timer():
    return create_timer(
        StartTimerPayload(mode="open", title="Write", project="Acme"), 1_000, "t-1"
    )


@pytest.fixture()
def entry():
    return HistoryEntry(
        id="t-1-5000",
        title="Write",
        project="Acme",
        started_at=1_000,
        ended_at=5_000,
        duration_ms=4_000,
        mode="open",
    )


class TestActiveTimer:
    def test_missing_reads_as_none(self, store):
        assert store.get_active_timer() is None

    def test_round_trip(self, store, kv_store, timer):
        store.set_active_timer(timer)

        assert store.get_active_timer() == timer
        raw = json.loads(kv_store.get_item(STORAGE_KEYS["ACTIVE"]))
        assert raw["createdAt"] == 1_000
        assert raw["project"] == "Acme"

    def test_none_removes_key(self, store, kv_store, timer):
        store.set_active_timer(timer)
        store.set_active_timer(None)
        assert kv_store.get_item(STORAGE_KEYS["ACTIVE"]) is None

    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            json.dumps({"id": "x"}),
            json.dumps({"id": "x", "title": "t", "mode": "pomodoro", "createdAt": 0, "startedAt": 0}),
            json.dumps([1, 2, 3]),
        ],
    )
    def test_corrupt_value_self_heals(self, store, kv_store, raw):
        kv_store.set_item(STORAGE_KEYS["ACTIVE"], raw)

        assert store.get_active_timer() is None
        assert kv_store.get_item(STORAGE_KEYS["ACTIVE"]) is None

    def test_reads_camel_case_written_elsewhere(self, store, kv_store):
        kv_store.set_item(
            STORAGE_KEYS["ACTIVE"],
            json.dumps(
                {
                    "id": "abc",
                    "title": "Pomodoro",
                    "mode": "pomodoro",
                    "createdAt": 0,
                    "startedAt": 0,
                    "isPaused": False,
                    "sessionPausedMs": 0,
                    "phasePausedMs": 0,
                    "pomodoro": {
                        "focusDurationMs": 1_500_000,
                        "breakDurationMs": 300_000,
                        "cycles": 4,
                        "completedFocusBlocks": 1,
                        "phase": "break",
                    },
                }
            ),
        )
        timer = store.get_active_timer()
        assert timer.pomodoro.phase == "break"
        assert timer.pomodoro.completed_focus_blocks == 1


class TestHistory:
    def test_missing_reads_as_empty(self, store):
        assert store.get_history() == []

    def test_round_trip(self, store, kv_store, entry):
        store.set_history([entry])

        assert store.get_history() == [entry]
        raw = json.loads(kv_store.get_item(STORAGE_KEYS["HISTORY"]))
        assert raw == [
            {
                "id": "t-1-5000",
                "title": "Write",
                "project": "Acme",
                "startedAt": 1_000,
                "endedAt": 5_000,
                "durationMs": 4_000,
                "mode": "open",
            }
        ]

    @pytest.mark.parametrize("raw", ["oops", json.dumps({"id": 1}), json.dumps([{"id": "x"}])])
    def test_corrupt_history_self_heals(self, store, kv_store, raw):
        kv_store.set_item(STORAGE_KEYS["HISTORY"], raw)

        assert store.get_history() == []
        assert kv_store.get_item(STORAGE_KEYS["HISTORY"]) is None

    def test_corruption_is_logged(self, store, kv_store, tmp_path):
        kv_store.set_item(STORAGE_KEYS["HISTORY"], "oops")
        store.get_history()

        from timelog_cli.utils.logger import get_logger

        for handler in get_logger().handlers:
            handler.flush()
        content = (tmp_path / "logs" / "timelog.log").read_text()
        assert "discarding corrupt history" in content


def test_keys_are_stable():
    assert STORAGE_KEYS == {
        "ACTIVE": "better-time-log/active-timer",
        "HISTORY": "better-time-log/history",
    }


def test_store_accepts_any_key_value_backend(kv_store, timer):
    TimerStore(kv_store).set_active_timer(timer)
    assert TimerStore(kv_store).get_active_timer() == timer
