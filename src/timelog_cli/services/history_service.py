"""Session history maintenance and lookups."""

from __future__ import annotations

from collections.abc import Iterable

from timelog_cli.models.errors import SessionNotFound
from timelog_cli.models.timer import HistoryEntry, sanitize_project, sanitize_tags
from timelog_cli.services.timer_store import TimerStore


def _distinct_sorted(values: Iterable[str | None]) -> list[str]:
    return sorted({v for v in values if v}, key=lambda v: (v.casefold(), v))


def list_projects(history: list[HistoryEntry]) -> list[str]:
    """Distinct project names, sorted case-insensitively."""
    return _distinct_sorted(entry.project for entry in history)


def list_tags(history: list[HistoryEntry]) -> list[str]:
    """Distinct tags across all sessions, sorted case-insensitively."""
    return _distinct_sorted(tag for entry in history for tag in entry.tags or [])


class HistoryService:
    """Edit, delete and clear logged sessions."""

    def __init__(self, store: TimerStore):
        self.store = store

    def list_sessions(self) -> list[HistoryEntry]:
        return self.store.get_history()

    def get_session(self, session_id: str) -> HistoryEntry:
        for entry in self.store.get_history():
            if entry.id == session_id:
                return entry
        raise SessionNotFound(f"Session not found: {session_id}")

    def update_session(
        self,
        session_id: str,
        project: str | None = None,
        tags: list[str] | None = None,
    ) -> list[HistoryEntry]:
        """Replace a session's project and tags.

        Raises:
            SessionNotFound: If no entry has *session_id*.
        """
        history = self.store.get_history()
        for index, entry in enumerate(history):
            if entry.id == session_id:
                history[index] = entry.model_copy(
                    update={
                        "project": sanitize_project(project),
                        "tags": sanitize_tags(tags),
                    }
                )
                self.store.set_history(history)
                return history
        raise SessionNotFound(f"Session not found: {session_id}")

    def delete_session(self, session_id: str) -> list[HistoryEntry]:
        history = self.store.get_history()
        remaining = [entry for entry in history if entry.id != session_id]
        if len(remaining) == len(history):
            raise SessionNotFound(f"Session not found: {session_id}")
        self.store.set_history(remaining)
        return remaining

    def clear_history(self) -> int:
        """Remove every session and return how many were dropped."""
        count = len(self.store.get_history())
        self.store.set_history([])
        return count
