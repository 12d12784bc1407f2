"""Timer lifecycle errors.

The taxonomy is closed: every lifecycle operation fails with exactly one of
these conditions and writes nothing when it does.
"""

from timelog_cli.utils.exit_codes import (
    ERROR_CONFLICT,
    ERROR_INVALID_ARGS,
    ERROR_NOT_FOUND,
)


class TimerError(Exception):
    """Base exception for all timer lifecycle errors."""

    code = "TIMER_ERROR"
    exit_code = 1
    default_message = "Timer operation failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class ActiveTimerExists(TimerError):
    """Raised when starting a timer while another one is active."""

    code = "ACTIVE_TIMER_EXISTS"
    exit_code = ERROR_CONFLICT
    default_message = "A timer is already running"


class NoActiveTimer(TimerError):
    """Raised when an operation needs an active timer and none exists."""

    code = "NO_ACTIVE_TIMER"
    exit_code = ERROR_NOT_FOUND
    default_message = "No running timer"


class AlreadyPaused(TimerError):
    """Raised when pausing a timer that is already paused."""

    code = "ALREADY_PAUSED"
    exit_code = ERROR_CONFLICT
    default_message = "Timer is already paused"


class NotPaused(TimerError):
    """Raised when resuming a timer that is not paused."""

    code = "NOT_PAUSED"
    exit_code = ERROR_CONFLICT
    default_message = "Timer is not paused"


class NotAPomodoro(TimerError):
    """Raised when a phase operation targets an open timer."""

    code = "NOT_A_POMODORO"
    exit_code = ERROR_INVALID_ARGS
    default_message = "No Pomodoro is running"


class SessionNotFound(TimerError):
    """Raised when a history entry id does not exist."""

    code = "SESSION_NOT_FOUND"
    exit_code = ERROR_NOT_FOUND
    default_message = "Session not found"


class InvalidTimerPayload(TimerError):
    """Raised when start parameters fail validation."""

    code = "INVALID_TIMER_PAYLOAD"
    exit_code = ERROR_INVALID_ARGS
    default_message = "Invalid timer settings"
