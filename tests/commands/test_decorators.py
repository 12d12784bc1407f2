"""Unit tests for command decorators."""

from unittest.mock import patch

import pytest
import typer

from timelog_cli.commands.decorators import command_wrapper
from timelog_cli.models.errors import ActiveTimerExists, NoActiveTimer
from timelog_cli.utils.exit_codes import ERROR_CONFLICT, ERROR_GENERAL, ERROR_NOT_FOUND


class TestCommandWrapper:
    def test_returns_result(self):
        @command_wrapper
        def ok():
            return 42

        assert ok() == 42

    def test_preserves_metadata(self):
        @command_wrapper
        def documented():
            """Does things."""

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Does things."

    @pytest.mark.parametrize(
        "error, exit_code",
        [(NoActiveTimer(), ERROR_NOT_FOUND), (ActiveTimerExists(), ERROR_CONFLICT)],
    )
    def test_timer_error_maps_to_exit_code(self, error, exit_code):
        @command_wrapper
        def failing():
            raise error

        with patch("timelog_cli.commands.decorators.format_error") as mock_error:
            with pytest.raises(typer.Exit) as exc_info:
                failing()

        assert exc_info.value.exit_code == exit_code
        mock_error.assert_called_once_with(str(error))

    def test_typer_exit_passes_through(self):
        @command_wrapper
        def exiting():
            raise typer.Exit(3)

        with pytest.raises(typer.Exit) as exc_info:
            exiting()
        assert exc_info.value.exit_code == 3

    def test_unexpected_error_is_general_failure(self):
        @command_wrapper
        def crashing():
            raise RuntimeError("boom")

        with patch("timelog_cli.commands.decorators.format_error") as mock_error:
            with pytest.raises(typer.Exit) as exc_info:
                crashing()

        assert exc_info.value.exit_code == ERROR_GENERAL
        assert "boom" in mock_error.call_args[0][0]

    def test_logs_lifecycle(self, tmp_path):
        @command_wrapper
        def noisy():
            raise NoActiveTimer()

        with patch("timelog_cli.commands.decorators.format_error"):
            with pytest.raises(typer.Exit):
                noisy()

        from timelog_cli.utils.logger import get_logger

        for handler in get_logger().handlers:
            handler.flush()
        content = (tmp_path / "logs" / "timelog.log").read_text()
        assert "command started: noisy" in content
        assert "command failed: noisy" in content
        assert "NO_ACTIVE_TIMER" in content
        assert "[exit ERROR_NOT_FOUND]" in content
