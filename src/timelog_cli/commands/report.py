"""Summary command - time per project over a calendar period."""

import typer
from rich.table import Table

from timelog_cli.services.config_service import get_history_service
from timelog_cli.services.report_service import (
    PERIODS,
    filter_sessions_by_range,
    get_period_range,
    get_project_breakdown,
    total_duration_ms,
)
from timelog_cli.utils.exit_codes import ERROR_INVALID_ARGS
from timelog_cli.utils.typer_helpers import SuggestingGroup
from timelog_cli.utils.ui.console import get_console
from timelog_cli.utils.ui.formatters import (
    format_error,
    format_info,
    format_output,
    format_readable_duration,
)

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Reports")
console = get_console()


def validate_period(period: str) -> str:
    if period not in PERIODS:
        format_error(f"Unknown period '{period}'. Use one of: {', '.join(PERIODS)}")
        raise typer.Exit(ERROR_INVALID_ARGS)
    return period


@app.command("summary")
@command_wrapper
def summary(
    period: str = typer.Option(
        "this-week", "--period", "-p", help=f"One of: {', '.join(PERIODS)}"
    ),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """Show time per project for a period."""
    date_range = get_period_range(validate_period(period))
    sessions = filter_sessions_by_range(
        get_history_service().list_sessions(), date_range
    )
    breakdown = get_project_breakdown(sessions)
    total = total_duration_ms(sessions)

    if output in ("json", "yaml"):
        format_output(
            {
                "period": period,
                "start": date_range.start.isoformat(timespec="seconds"),
                "end": date_range.end.isoformat(timespec="seconds"),
                "total_ms": total,
                "sessions": len(sessions),
                "projects": [
                    {
                        "project": item.project,
                        "total_ms": item.total_ms,
                        "sessions": item.session_count,
                        "percentage": item.percentage,
                    }
                    for item in breakdown
                ],
            },
            output,
        )
        return

    span = f"{date_range.start:%Y-%m-%d} to {date_range.end:%Y-%m-%d}"
    if not sessions:
        format_info(f"No sessions between {span}")
        return

    table = Table(
        title=f"{period} ({span})", show_header=True, header_style="bold magenta"
    )
    table.add_column("Project")
    table.add_column("Time", justify="right")
    table.add_column("Sessions", justify="right")
    table.add_column("Share", justify="right")
    for item in breakdown:
        table.add_row(
            item.project,
            format_readable_duration(item.total_ms),
            str(item.session_count),
            f"{item.percentage:.1f}%",
        )
    console.print(table)
    console.print(
        f"[bold]Total:[/bold] {format_readable_duration(total)} "
        f"across {len(sessions)} session(s)"
    )
