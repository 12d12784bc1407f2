"""Key/value store port.

The timer store only needs string keys mapped to string values. Keeping the
contract this small lets the lifecycle engine run against SQLite in the CLI
and against a plain dictionary in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract base class for string key/value persistence."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value, or ``None`` when the key is missing."""
        raise NotImplementedError(
            "KeyValueStore.get_item() must be implemented by adapter"
        )

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Create or overwrite *key*."""
        raise NotImplementedError(
            "KeyValueStore.set_item() must be implemented by adapter"
        )

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete *key*; deleting a missing key is not an error."""
        raise NotImplementedError(
            "KeyValueStore.remove_item() must be implemented by adapter"
        )

    def close(self) -> None:
        """Release resources held by the store. No-op by default."""
