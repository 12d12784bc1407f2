"""In-memory key/value store."""

from __future__ import annotations

from timelog_cli.adapters.base import KeyValueStore


class MemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store, used for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._items)
