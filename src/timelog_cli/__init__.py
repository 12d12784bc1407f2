"""TimeLog CLI - single active timer and Pomodoro tracker with session history."""

__version__ = "0.1.0"
