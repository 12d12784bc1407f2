"""Configuration service for managing TimeLog CLI configuration.

This module provides the ConfigService class, which is the single source of
truth for configuration management. It handles:

- Loading and saving config.json
- Dot-separated key access for the ``config`` commands
- Wiring the configured key/value store into the timer services
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel

from timelog_cli.adapters.sqlite import SqliteKeyValueStore
from timelog_cli.models.config_models import AppConfig
from timelog_cli.services.history_service import HistoryService
from timelog_cli.services.timer_service import TimerService
from timelog_cli.services.timer_store import TimerStore


class ConfigService:
    """Service for managing application configuration.

    Besides loading and saving settings, the service owns the lazily created
    timer store so that every command in one process shares a single
    ``TimerService`` (and therefore a single writer lock).
    """

    def __init__(self):
        """Initialize the config service."""

        self.config_dir = Path(user_config_dir("timelog_cli"))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir("timelog_cli"))

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None
        self._timer_store: TimerStore | None = None
        self._timer_service: TimerService | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        if self._config is not None:
            return self._config  # Return cached config if already loaded

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # Expected on first run
            self._config = AppConfig()
            self.save_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self):
        """Save the current configuration to storage."""
        if self._config is None:
            raise RuntimeError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._config.model_dump_json(indent=4))

            # Set file permissions
            self.config_path.chmod(0o600)
        except Exception as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key."""
        value: Any = self.config
        for k in key.split("."):
            if isinstance(value, BaseModel) and k in type(value).model_fields:
                value = getattr(value, k)
            else:
                return None
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key.

        Raises:
            KeyError: If the key does not exist.
            pydantic.ValidationError: If the value is invalid for the key.
        """
        keys = key.split(".")
        if not self._is_known_key(keys):
            raise KeyError(key)

        config_dict = self.config.model_dump()
        current = config_dict
        for k in keys[:-1]:
            current = current[k]
        current[keys[-1]] = value

        self._config = AppConfig.model_validate(config_dict)
        self.save_config()
        self._reset_services()

    def reset(self, key: str | None = None) -> None:
        """Reset the whole configuration, or a single key, to defaults."""
        if key is None:
            self._config = AppConfig()
            self.save_config()
            self._reset_services()
            return

        keys = key.split(".")
        if not self._is_known_key(keys):
            raise KeyError(key)

        default_value: Any = AppConfig()
        for k in keys:
            default_value = getattr(default_value, k)
        self.set(key, default_value)

    def _is_known_key(self, keys: list[str]) -> bool:
        model: Any = AppConfig
        for k in keys:
            fields = getattr(model, "model_fields", None)
            if not fields or k not in fields:
                return False
            model = fields[k].annotation
        return True

    def _reset_services(self) -> None:
        if self._timer_store is not None:
            self._timer_store.kv_store.close()
        self._timer_store = None
        self._timer_service = None

    # ----- Service wiring -----

    @property
    def db_path(self) -> Path:
        configured = self.config.storage.db_path
        return Path(configured) if configured else self.data_dir / "timelog.db"

    @property
    def timer_store(self) -> TimerStore:
        if self._timer_store is None:
            self._timer_store = TimerStore(SqliteKeyValueStore(self.db_path))
        return self._timer_store

    @property
    def timer_service(self) -> TimerService:
        if self._timer_service is None:
            self._timer_service = TimerService(self.timer_store)
        return self._timer_service


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service


def get_timer_service() -> TimerService:
    """Get the process-wide TimerService for the configured store."""
    return get_config_service().timer_service


def get_history_service() -> HistoryService:
    return HistoryService(get_config_service().timer_store)
