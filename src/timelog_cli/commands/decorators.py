"""Decorators for command functions."""

import functools
import time
import traceback
from collections.abc import Callable

import typer

from timelog_cli.models.errors import TimerError
from timelog_cli.utils.exit_codes import ERROR_GENERAL, get_exit_code_name
from timelog_cli.utils.logger import get_logger
from timelog_cli.utils.ui.formatters import format_error


def command_wrapper(func: Callable):
    """Log a command's lifecycle and turn domain errors into exit codes."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger()
        cmd = func.__name__
        start = time.monotonic()
        logger.info("command started: %s", cmd)
        try:
            result = func(*args, **kwargs)
            elapsed = time.monotonic() - start
            logger.info("command completed: %s (%.3fs)", cmd, elapsed)
            return result

        except TimerError as e:
            elapsed = time.monotonic() - start
            logger.error(
                "command failed: %s (%.3fs) - %s: %s [exit %s]",
                cmd,
                elapsed,
                e.code,
                str(e),
                get_exit_code_name(e.exit_code),
            )
            format_error(str(e))
            raise typer.Exit(code=e.exit_code) from e

        except typer.Exit:
            # Re-raise Typer's own exits (like --help or explicit Exit(0))
            raise

        except Exception as e:
            elapsed = time.monotonic() - start
            logger.error(
                "command failed: %s (%.3fs) - %s\n%s",
                cmd,
                elapsed,
                str(e),
                traceback.format_exc(),
            )
            format_error(f"An unexpected error occurred: {str(e)}")
            raise typer.Exit(code=ERROR_GENERAL) from e

    return wrapper
