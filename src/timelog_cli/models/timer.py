"""Active timer state, history entries and their pure transitions.

Every model here is frozen: transitions return a new value built with
``model_copy(update=...)`` and never mutate the input. Field names are
snake_case in Python and camelCase on the wire, so stored values stay
compatible with the JSON layout used by the key/value store.
"""

from __future__ import annotations

import math
import uuid
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from timelog_cli.models.errors import (
    AlreadyPaused,
    InvalidTimerPayload,
    NotAPomodoro,
    NotPaused,
)

TimerMode = Literal["open", "pomodoro"]
TimerPhase = Literal["focus", "break"]

MAX_HISTORY_ITEMS = 20
MAX_TITLE_LENGTH = 60
MAX_PROJECT_LENGTH = 60
MAX_TAG_LENGTH = 30
DEFAULT_CYCLES = 4
MS_PER_MINUTE = 60 * 1000

DEFAULT_TITLES: dict[str, str] = {
    "open": "Working Session",
    "pomodoro": "Pomodoro",
}


class _WireModel(BaseModel):
    """Immutable model serialized with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dictionary using wire names."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Sanitizers
# ---------------------------------------------------------------------------


def sanitize_title(title: str | None, mode: TimerMode) -> str:
    """Trim a title, falling back to the mode's default label."""
    trimmed = (title or "").strip()
    return (trimmed or DEFAULT_TITLES[mode])[:MAX_TITLE_LENGTH]


def sanitize_project(project: str | None) -> str | None:
    """Trim and bound a project name; blank input means no project.

    The result is stable under repeated application.
    """
    trimmed = (project or "").strip()
    if not trimmed:
        return None
    return trimmed[:MAX_PROJECT_LENGTH].strip()


def sanitize_tags(tags: list[str] | None) -> list[str] | None:
    """Trim tags, drop blanks and duplicates, keep first-seen order."""
    if not tags:
        return None
    cleaned: list[str] = []
    for tag in tags:
        value = (tag or "").strip()[:MAX_TAG_LENGTH].strip()
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned or None


def parse_tags(raw: str | None) -> list[str] | None:
    """Parse a comma-separated tag string."""
    if not raw:
        return None
    return sanitize_tags(raw.split(","))


# ---------------------------------------------------------------------------
# State models
# ---------------------------------------------------------------------------


class PomodoroState(_WireModel):
    """Phase bookkeeping of a Pomodoro timer."""

    focus_duration_ms: int = Field(gt=0)
    break_duration_ms: int = Field(gt=0)
    cycles: int = Field(ge=1)
    completed_focus_blocks: int = Field(default=0, ge=0)
    phase: TimerPhase = "focus"

    @model_validator(mode="after")
    def _check_progress(self) -> PomodoroState:
        if self.completed_focus_blocks > self.cycles:
            raise ValueError("completedFocusBlocks cannot exceed cycles")
        return self

    @property
    def phase_duration_ms(self) -> int:
        if self.phase == "focus":
            return self.focus_duration_ms
        return self.break_duration_ms


class TimerState(_WireModel):
    """The single in-progress interval."""

    id: str
    title: str
    project: str | None = None
    tags: list[str] | None = None
    mode: TimerMode
    created_at: int
    started_at: int
    target_duration_ms: int | None = Field(default=None, gt=0)
    pomodoro: PomodoroState | None = None
    is_paused: bool = False
    paused_at: int | None = None
    session_paused_ms: int = Field(default=0, ge=0)
    phase_paused_ms: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_consistency(self) -> TimerState:
        if self.mode == "pomodoro" and self.pomodoro is None:
            raise ValueError("pomodoro timers need pomodoro settings")
        if self.mode == "open" and self.pomodoro is not None:
            raise ValueError("open timers cannot carry pomodoro settings")
        if self.is_paused != (self.paused_at is not None):
            raise ValueError("pausedAt must be set exactly when the timer is paused")
        return self

    @property
    def phase_budget_ms(self) -> int | None:
        """Time budget of the current phase; ``None`` means unbounded."""
        if self.pomodoro is not None:
            return self.pomodoro.phase_duration_ms
        return self.target_duration_ms

    def _reference_instant(self, now: int) -> int:
        # Elapsed time freezes at the pause instant while paused.
        if self.is_paused and self.paused_at is not None:
            return self.paused_at
        return now

    def phase_elapsed_ms(self, now: int) -> int:
        """Unpaused time spent in the current phase."""
        return self._reference_instant(now) - self.started_at - self.phase_paused_ms

    def session_elapsed_ms(self, now: int) -> int:
        """Unpaused time since the timer was created, floored at 0."""
        elapsed = self._reference_instant(now) - self.created_at - self.session_paused_ms
        return max(0, elapsed)

    def remaining_ms(self, now: int) -> int | None:
        """Budget left in the current phase (may be negative once expired)."""
        budget = self.phase_budget_ms
        if budget is None:
            return None
        return budget - self.phase_elapsed_ms(now)


class HistoryEntry(_WireModel):
    """Immutable record of a finished session."""

    id: str
    title: str
    project: str | None = None
    tags: list[str] | None = None
    started_at: int
    ended_at: int
    duration_ms: int = Field(ge=0)
    mode: TimerMode
    pomodoro_cycles: int | None = None


# ---------------------------------------------------------------------------
# Start payload
# ---------------------------------------------------------------------------


def minutes_to_ms(minutes: float) -> int:
    """Convert a length in minutes to whole milliseconds.

    Raises:
        ValueError: If the result is infinite or shorter than 1 ms.
    """
    ms = minutes * MS_PER_MINUTE
    if not math.isfinite(ms) or round(ms) < 1:
        raise ValueError("length must be at least 1 ms and finite in milliseconds")
    return round(ms)


class PomodoroSettings(BaseModel):
    """Focus/break lengths in minutes and the number of focus blocks."""

    model_config = ConfigDict(frozen=True)

    focus_minutes: float = Field(gt=0, allow_inf_nan=False)
    break_minutes: float = Field(gt=0, allow_inf_nan=False)
    cycles: int = DEFAULT_CYCLES

    @field_validator("focus_minutes", "break_minutes")
    @classmethod
    def _check_length(cls, value: float) -> float:
        minutes_to_ms(value)
        return value

    @field_validator("cycles", mode="before")
    @classmethod
    def _round_cycles(cls, value: Any) -> int:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return DEFAULT_CYCLES
        if not math.isfinite(number) or number <= 0:
            return DEFAULT_CYCLES
        return max(1, math.floor(number + 0.5))


class StartTimerPayload(BaseModel):
    """Parameters for starting a timer."""

    model_config = ConfigDict(frozen=True)

    mode: TimerMode = "open"
    title: str | None = None
    project: str | None = None
    tags: list[str] | None = None
    target_duration_minutes: float | None = Field(
        default=None, gt=0, allow_inf_nan=False
    )
    pomodoro: PomodoroSettings | None = None

    @field_validator("target_duration_minutes")
    @classmethod
    def _check_target(cls, value: float | None) -> float | None:
        if value is not None:
            minutes_to_ms(value)
        return value

    @model_validator(mode="after")
    def _check_mode(self) -> StartTimerPayload:
        if self.mode == "pomodoro" and self.pomodoro is None:
            raise ValueError("pomodoro mode requires focus/break lengths")
        return self


def parse_start_payload(data: StartTimerPayload | dict[str, Any]) -> StartTimerPayload:
    """Validate raw start parameters.

    Raises:
        InvalidTimerPayload: If any field is out of range.
    """
    if isinstance(data, StartTimerPayload):
        return data
    try:
        return StartTimerPayload.model_validate(data)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'payload'}: {err['msg']}"
            for err in e.errors()
        )
        raise InvalidTimerPayload(f"Invalid timer settings: {details}") from e


# ---------------------------------------------------------------------------
# Pure transitions
# ---------------------------------------------------------------------------


def create_timer(
    payload: StartTimerPayload, now: int, timer_id: str | None = None
) -> TimerState:
    """Build a fresh timer whose first phase starts at *now*."""
    target_ms = None
    pomodoro = None

    if payload.mode == "open" and payload.target_duration_minutes:
        target_ms = minutes_to_ms(payload.target_duration_minutes)

    if payload.mode == "pomodoro" and payload.pomodoro is not None:
        settings = payload.pomodoro
        pomodoro = PomodoroState(
            focus_duration_ms=minutes_to_ms(settings.focus_minutes),
            break_duration_ms=minutes_to_ms(settings.break_minutes),
            cycles=settings.cycles,
            completed_focus_blocks=0,
            phase="focus",
        )

    return TimerState(
        id=timer_id or str(uuid.uuid4()),
        title=sanitize_title(payload.title, payload.mode),
        project=sanitize_project(payload.project),
        tags=sanitize_tags(payload.tags),
        mode=payload.mode,
        created_at=now,
        started_at=now,
        target_duration_ms=target_ms,
        pomodoro=pomodoro,
        is_paused=False,
        paused_at=None,
        session_paused_ms=0,
        phase_paused_ms=0,
    )


def pause_timer(timer: TimerState, now: int) -> TimerState:
    """Mark the timer paused at *now*; accumulators change on resume."""
    if timer.is_paused:
        raise AlreadyPaused()
    return timer.model_copy(update={"is_paused": True, "paused_at": now})


def resume_timer(timer: TimerState, now: int) -> TimerState:
    """Fold the realized pause interval into both accumulators."""
    if not timer.is_paused or timer.paused_at is None:
        raise NotPaused()
    delta = max(0, now - timer.paused_at)
    return timer.model_copy(
        update={
            "is_paused": False,
            "paused_at": None,
            "session_paused_ms": timer.session_paused_ms + delta,
            "phase_paused_ms": timer.phase_paused_ms + delta,
        }
    )


def with_project(timer: TimerState, project: str | None) -> TimerState:
    return timer.model_copy(update={"project": sanitize_project(project)})


def start_phase(
    timer: TimerState,
    phase: TimerPhase,
    now: int,
    completed_focus_blocks: int | None = None,
) -> TimerState:
    """Enter *phase* at *now*, resetting the per-phase clock.

    Raises:
        NotAPomodoro: If *timer* has no Pomodoro state.
    """
    if timer.pomodoro is None:
        raise NotAPomodoro()
    pomodoro_update: dict[str, Any] = {"phase": phase}
    if completed_focus_blocks is not None:
        pomodoro_update["completed_focus_blocks"] = completed_focus_blocks
    return timer.model_copy(
        update={
            "started_at": now,
            "phase_paused_ms": 0,
            "pomodoro": timer.pomodoro.model_copy(update=pomodoro_update),
        }
    )


def build_history_entry(timer: TimerState, ended_at: int) -> HistoryEntry:
    """Finalize *timer* into a history record ending at *ended_at*."""
    return HistoryEntry(
        id=f"{timer.id}-{ended_at}",
        title=timer.title,
        project=timer.project,
        tags=timer.tags,
        started_at=timer.created_at,
        ended_at=ended_at,
        duration_ms=max(0, ended_at - timer.created_at - timer.session_paused_ms),
        mode=timer.mode,
        pomodoro_cycles=(
            timer.pomodoro.completed_focus_blocks if timer.pomodoro else None
        ),
    )


def prepend_history(
    history: list[HistoryEntry], entry: HistoryEntry
) -> list[HistoryEntry]:
    """Newest first, keeping at most ``MAX_HISTORY_ITEMS`` entries."""
    return [entry, *history][:MAX_HISTORY_ITEMS]
