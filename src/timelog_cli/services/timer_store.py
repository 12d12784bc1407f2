"""Persistence gateway for the active timer and the session history.

Values are stored as JSON strings under fixed keys. Reads are self-healing:
a value that no longer parses is treated as absent and its key is removed,
so one corrupt write never wedges the timer.
"""

from __future__ import annotations

from pydantic import TypeAdapter, ValidationError

from timelog_cli.adapters.base import KeyValueStore
from timelog_cli.models.timer import HistoryEntry, TimerState
from timelog_cli.utils.logger import get_logger

STORAGE_KEYS = {
    "ACTIVE": "better-time-log/active-timer",
    "HISTORY": "better-time-log/history",
}

_history_adapter = TypeAdapter(list[HistoryEntry])


class TimerStore:
    """Typed access to the active timer and history keys."""

    def __init__(self, kv_store: KeyValueStore):
        self.kv_store = kv_store

    def get_active_timer(self) -> TimerState | None:
        """Load the active timer, or ``None`` if missing or unreadable."""
        raw = self.kv_store.get_item(STORAGE_KEYS["ACTIVE"])
        if not raw:
            return None
        try:
            return TimerState.model_validate_json(raw)
        except ValidationError as e:
            get_logger().warning(
                "discarding corrupt active timer: %s", e.errors()[0]["msg"]
            )
            self.kv_store.remove_item(STORAGE_KEYS["ACTIVE"])
            return None

    def set_active_timer(self, timer: TimerState | None) -> None:
        """Persist *timer*; ``None`` clears the active timer."""
        if timer is None:
            self.kv_store.remove_item(STORAGE_KEYS["ACTIVE"])
        else:
            self.kv_store.set_item(STORAGE_KEYS["ACTIVE"], timer.to_json())

    def get_history(self) -> list[HistoryEntry]:
        """Load history newest first; unreadable history reads as empty."""
        raw = self.kv_store.get_item(STORAGE_KEYS["HISTORY"])
        if not raw:
            return []
        try:
            return _history_adapter.validate_json(raw)
        except ValidationError as e:
            get_logger().warning(
                "discarding corrupt history: %s", e.errors()[0]["msg"]
            )
            self.kv_store.remove_item(STORAGE_KEYS["HISTORY"])
            return []

    def set_history(self, history: list[HistoryEntry]) -> None:
        payload = _history_adapter.dump_json(
            history, by_alias=True, exclude_none=True
        ).decode("utf-8")
        self.kv_store.set_item(STORAGE_KEYS["HISTORY"], payload)
