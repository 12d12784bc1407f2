"""Shared test fixtures and configuration.

Provides a manually driven clock, an in-memory store and isolation from the
real user config/data/log directories.
"""

from __future__ import annotations

import logging
import logging.handlers
from unittest.mock import patch

import pytest

from timelog_cli.adapters.memory import MemoryKeyValueStore
from timelog_cli.services.timer_service import TimerService
from timelog_cli.services.timer_store import TimerStore
from timelog_cli.utils.clock import FixedClock

T0 = 1_700_000_000_000


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


def _drop_log_handlers() -> None:
    logger = logging.getLogger("timelog_cli")
    for handler in list(logger.handlers):
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            logger.removeHandler(handler)
            handler.close()


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path):
    """Send log output to *tmp_path* and reset the logger singleton."""
    import timelog_cli.utils.logger as logger_mod

    logger_mod._logger = None
    _drop_log_handlers()
    with patch(
        "timelog_cli.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")
    ):
        yield
    _drop_log_handlers()
    logger_mod._logger = None


# ---------------------------------------------------------------------------
# Core fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock():
    return FixedClock(T0)


@pytest.fixture()
def kv_store():
    return MemoryKeyValueStore()


@pytest.fixture()
def store(kv_store):
    return TimerStore(kv_store)


@pytest.fixture()
def service(store, clock):
    return TimerService(store, clock)


# ---------------------------------------------------------------------------
# Config isolation helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from timelog_cli.services.config_service import ConfigService, get_config_service

    get_config_service.cache_clear()
    with patch(
        "timelog_cli.services.config_service.user_config_dir",
        return_value=str(tmp_path / "config"),
    ):
        with patch(
            "timelog_cli.services.config_service.user_data_dir",
            return_value=str(tmp_path / "data"),
        ):
            yield ConfigService()
    get_config_service.cache_clear()


@pytest.fixture()
def cli_service(tmp_path, clock):
    """Wire the cached ConfigService to a tmp SQLite file and a fixed clock.

    Commands resolve their ``TimerService`` through ``get_timer_service()``;
    this fixture returns that same instance so tests can seed state and move
    the clock between invocations.
    """
    from timelog_cli.services.config_service import get_config_service

    get_config_service.cache_clear()
    with patch(
        "timelog_cli.services.config_service.user_config_dir",
        return_value=str(tmp_path / "config"),
    ):
        with patch(
            "timelog_cli.services.config_service.user_data_dir",
            return_value=str(tmp_path / "data"),
        ):
            config_service = get_config_service()
            timer_service = TimerService(config_service.timer_store, clock)
            config_service._timer_service = timer_service
            yield timer_service
            config_service.timer_store.kv_store.close()
    get_config_service.cache_clear()
