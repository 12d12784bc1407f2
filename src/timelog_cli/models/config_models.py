"""Configuration models for TimeLog CLI."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class PomodoroDefaults(BaseModel):
    """Defaults used when a Pomodoro is started without explicit lengths."""

    focus_minutes: float = Field(default=25, gt=0)
    break_minutes: float = Field(default=5, gt=0)
    cycles: int = Field(default=4, ge=1)


class SchedulerConfig(BaseModel):
    """Phase scheduler configuration."""

    tick_seconds: float = Field(default=1.0, gt=0)


class StorageConfig(BaseModel):
    """Key/value store location."""

    db_path: str | None = Field(
        default=None, description="SQLite file; defaults to the user data dir"
    )

    @field_validator("db_path")
    @classmethod
    def validate_db_path(cls, v: str | None) -> str | None:
        """Treat a blank path as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()


class OutputConfig(BaseModel):
    """Output configuration."""

    color: bool = Field(default=True)


class AppConfig(BaseModel):
    """Main TimeLog configuration"""

    pomodoro: PomodoroDefaults = Field(default_factory=PomodoroDefaults)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
