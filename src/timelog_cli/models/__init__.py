"""Data models for TimeLog CLI."""

from .config_models import AppConfig
from .errors import (
    ActiveTimerExists,
    AlreadyPaused,
    InvalidTimerPayload,
    NoActiveTimer,
    NotAPomodoro,
    NotPaused,
    SessionNotFound,
    TimerError,
)
from .timer import (
    MAX_HISTORY_ITEMS,
    HistoryEntry,
    PomodoroSettings,
    PomodoroState,
    StartTimerPayload,
    TimerState,
    sanitize_project,
)

__all__ = [
    "AppConfig",
    "TimerError",
    "ActiveTimerExists",
    "NoActiveTimer",
    "AlreadyPaused",
    "NotPaused",
    "NotAPomodoro",
    "SessionNotFound",
    "InvalidTimerPayload",
    "MAX_HISTORY_ITEMS",
    "HistoryEntry",
    "PomodoroSettings",
    "PomodoroState",
    "StartTimerPayload",
    "TimerState",
    "sanitize_project",
]
