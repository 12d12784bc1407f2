"""Export commands - write logged sessions as CSV or JSON."""

from pathlib import Path

import typer

from timelog_cli.models.timer import HistoryEntry
from timelog_cli.services.config_service import get_history_service
from timelog_cli.services.report_service import (
    PERIODS,
    export_to_csv,
    export_to_json,
    filter_sessions_by_range,
    get_period_range,
)
from timelog_cli.utils.typer_helpers import SuggestingGroup
from timelog_cli.utils.ui.formatters import format_success

from .decorators import command_wrapper
from .report import validate_period

app = typer.Typer(cls=SuggestingGroup, help="Export logged sessions")

_PERIOD_HELP = f"Only sessions from one of: {', '.join(PERIODS)}"
_FILE_HELP = "Write to this file instead of stdout"


def _select_sessions(period: str | None) -> list[HistoryEntry]:
    sessions = get_history_service().list_sessions()
    if period is None:
        return sessions
    return filter_sessions_by_range(sessions, get_period_range(validate_period(period)))


def _emit(content: str, output_file: Path | None, count: int) -> None:
    if output_file is None:
        typer.echo(content, nl=False)
        return
    output_file.write_text(content, encoding="utf-8")
    format_success(f"Exported {count} session(s) to {output_file}")


@app.command("csv")
@command_wrapper
def export_csv(
    period: str | None = typer.Option(None, "--period", "-p", help=_PERIOD_HELP),
    output_file: Path | None = typer.Option(
        None, "--output-file", "-f", help=_FILE_HELP
    ),
) -> None:
    """Export sessions as CSV."""
    sessions = _select_sessions(period)
    _emit(export_to_csv(sessions), output_file, len(sessions))


@app.command("json")
@command_wrapper
def export_json(
    period: str | None = typer.Option(None, "--period", "-p", help=_PERIOD_HELP),
    output_file: Path | None = typer.Option(
        None, "--output-file", "-f", help=_FILE_HELP
    ),
) -> None:
    """Export sessions as JSON."""
    sessions = _select_sessions(period)
    _emit(export_to_json(sessions) + "\n", output_file, len(sessions))
