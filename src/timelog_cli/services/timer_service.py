"""Timer lifecycle engine.

``TimerService`` owns every transition of the single active timer: start,
pause, resume, project assignment, cancel, stop and Pomodoro phase
advancement. Each operation reads the stored timer, validates, computes the
next value with the pure helpers in ``timelog_cli.models.timer`` and writes it
back. The whole read-check-write sequence runs under one lock and fails
before any write, so a failed operation never leaves partial state behind.

The engine neither logs nor retries; callers translate ``TimerError``
subclasses into user-facing messages.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Literal

from timelog_cli.models.errors import ActiveTimerExists, NoActiveTimer, NotAPomodoro
from timelog_cli.models.timer import (
    HistoryEntry,
    StartTimerPayload,
    TimerState,
    build_history_entry,
    create_timer,
    parse_start_payload,
    pause_timer,
    prepend_history,
    resume_timer,
    start_phase,
    with_project,
)
from timelog_cli.services.timer_store import TimerStore
from timelog_cli.utils.clock import Clock, SystemClock

AdvanceAction = Literal["completed", "to-break", "to-focus"]


@dataclass(frozen=True)
class StopResult:
    """Outcome of finalizing a timer."""

    entry: HistoryEntry
    history: list[HistoryEntry]


@dataclass(frozen=True)
class PomodoroAdvanceResult:
    """Outcome of moving a Pomodoro to its next phase."""

    action: AdvanceAction
    timer: TimerState | None  # None once the Pomodoro is completed
    message: str
    subtitle: str
    entry: HistoryEntry | None = None


class TimerService:
    """Lifecycle operations on the single active timer."""

    def __init__(self, store: TimerStore, clock: Clock | None = None):
        self.store = store
        self.clock = clock or SystemClock()
        self.lock = threading.RLock()

    # ----- Reads -----

    def get_active_timer(self) -> TimerState | None:
        return self.store.get_active_timer()

    def get_history(self) -> list[HistoryEntry]:
        return self.store.get_history()

    def _require_active(self) -> TimerState:
        timer = self.store.get_active_timer()
        if timer is None:
            raise NoActiveTimer()
        return timer

    # ----- Lifecycle -----

    def start(self, payload: StartTimerPayload | dict[str, Any]) -> TimerState:
        """Create and persist a new timer.

        Raises:
            InvalidTimerPayload: If the payload fails validation.
            ActiveTimerExists: If a timer is already active.
        """
        payload = parse_start_payload(payload)
        with self.lock:
            if self.store.get_active_timer() is not None:
                raise ActiveTimerExists()
            timer = create_timer(payload, self.clock.now_ms())
            self.store.set_active_timer(timer)
            return timer

    def pause(self) -> TimerState:
        with self.lock:
            updated = pause_timer(self._require_active(), self.clock.now_ms())
            self.store.set_active_timer(updated)
            return updated

    def resume(self) -> TimerState:
        with self.lock:
            updated = resume_timer(self._require_active(), self.clock.now_ms())
            self.store.set_active_timer(updated)
            return updated

    def assign_project(self, project: str | None = None) -> TimerState:
        """Replace the active timer's project; blank clears it."""
        with self.lock:
            updated = with_project(self._require_active(), project)
            self.store.set_active_timer(updated)
            return updated

    def cancel(self) -> TimerState:
        """Discard the active timer without logging it.

        Returns the discarded timer so callers can report what was dropped.
        """
        with self.lock:
            timer = self._require_active()
            self.store.set_active_timer(None)
            return timer

    def stop(self, timer: TimerState | None = None) -> StopResult:
        """Finalize *timer* (default: the stored one) into history.

        Raises:
            NoActiveTimer: If no timer is given and none is stored.
        """
        with self.lock:
            if timer is None:
                timer = self._require_active()
            entry = build_history_entry(timer, self.clock.now_ms())
            history = prepend_history(self.store.get_history(), entry)
            self.store.set_history(history)
            self.store.set_active_timer(None)
            return StopResult(entry=entry, history=history)

    def advance_pomodoro_phase(
        self, timer: TimerState, skip: bool = False
    ) -> PomodoroAdvanceResult:
        """Move a Pomodoro to its next phase.

        Focus increments the completed block count and either finishes the
        session (last block) or starts a break. Break always returns to
        focus. ``skip`` only changes the wording of the result; manual skips
        and natural expiry share this path.

        Raises:
            NotAPomodoro: If *timer* has no Pomodoro state.
        """
        pomodoro = timer.pomodoro
        if pomodoro is None:
            raise NotAPomodoro()

        with self.lock:
            now = self.clock.now_ms()

            if pomodoro.phase == "focus":
                completed = pomodoro.completed_focus_blocks + 1
                if completed >= pomodoro.cycles:
                    finished = timer.model_copy(
                        update={
                            "pomodoro": pomodoro.model_copy(
                                update={"completed_focus_blocks": completed}
                            )
                        }
                    )
                    result = self.stop(finished)
                    return PomodoroAdvanceResult(
                        action="completed",
                        timer=None,
                        message="Focus skipped" if skip else "Pomodoro complete",
                        subtitle="Time to celebrate!",
                        entry=result.entry,
                    )

                updated = start_phase(timer, "break", now, completed)
                self.store.set_active_timer(updated)
                return PomodoroAdvanceResult(
                    action="to-break",
                    timer=updated,
                    message="Skipped to break" if skip else "Focus complete",
                    subtitle="Break started",
                )

            updated = start_phase(timer, "focus", now)
            self.store.set_active_timer(updated)
            return PomodoroAdvanceResult(
                action="to-focus",
                timer=updated,
                message="Skipped break" if skip else "Break finished",
                subtitle="Back to focus",
            )

    def skip_phase(self) -> PomodoroAdvanceResult:
        """Skip the active Pomodoro's current phase."""
        with self.lock:
            return self.advance_pomodoro_phase(self._require_active(), skip=True)
