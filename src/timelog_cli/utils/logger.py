"""Application-wide logger writing to platformdirs user_log_dir."""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "timelog_cli"
_LOG_FILE = "timelog.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

_logger: logging.Logger | None = None


def get_logger() -> logging.Logger:
    """Return the singleton application logger, initialising it on first call."""
    global _logger
    if _logger is not None:
        return _logger

    log_dir = Path(user_log_dir(_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / _LOG_FILE

    logger = logging.getLogger(_APP_NAME)
    logger.setLevel(logging.DEBUG)
    # Foreign handlers stay; the file handler is attached once per path.
    if not any(_writes_to(handler, log_path) for handler in logger.handlers):
        logger.addHandler(_rotating_handler(log_path))
    logger.propagate = False

    _logger = logger
    return _logger


def _writes_to(handler: logging.Handler, log_path: Path) -> bool:
    return isinstance(
        handler, logging.handlers.RotatingFileHandler
    ) and handler.baseFilename == os.path.abspath(log_path)


def _rotating_handler(log_path: Path) -> logging.handlers.RotatingFileHandler:
    handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    return handler
