"""History commands - list, edit and delete logged sessions."""

import typer
from rich.prompt import Confirm

from timelog_cli.models.timer import parse_tags
from timelog_cli.services.config_service import get_history_service
from timelog_cli.services.history_service import list_projects, list_tags
from timelog_cli.utils.typer_helpers import SuggestingGroup
from timelog_cli.utils.ui.console import get_console
from timelog_cli.utils.ui.formatters import (
    build_summary,
    format_info,
    format_output,
    format_success,
    format_warning,
    history_row,
)

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Logged sessions")
console = get_console()


@app.command("list")
@command_wrapper
def list_sessions(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of sessions to show"),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """List logged sessions, newest first."""
    sessions = get_history_service().list_sessions()
    if not sessions:
        format_info("No sessions logged yet")
        return
    format_output([history_row(entry) for entry in sessions[:limit]], output)


@app.command("edit")
@command_wrapper
def edit_session(
    session_id: str = typer.Argument(..., help="Session ID"),
    project: str | None = typer.Option(
        None, "--project", "-p", help="New project (empty string clears it)"
    ),
    tags: str | None = typer.Option(
        None, "--tags", "-t", help="New comma-separated tags (empty string clears)"
    ),
) -> None:
    """Change a session's project or tags."""
    service = get_history_service()
    entry = service.get_session(session_id)
    service.update_session(
        session_id,
        project=entry.project if project is None else project,
        tags=entry.tags if tags is None else parse_tags(tags),
    )
    updated = service.get_session(session_id)
    format_success(f"Updated {build_summary(updated)}")


@app.command("delete")
@command_wrapper
def delete_session(
    session_id: str = typer.Argument(..., help="Session ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a logged session."""
    service = get_history_service()
    entry = service.get_session(session_id)
    if not yes and not Confirm.ask(
        f"Delete '{entry.title}' ({build_summary(entry)})?", default=False
    ):
        format_info("Nothing deleted")
        raise typer.Exit(0)
    service.delete_session(session_id)
    format_success(f"Deleted '{entry.title}'")


@app.command("clear")
@command_wrapper
def clear_history(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete every logged session."""
    if not yes and not Confirm.ask("Delete all logged sessions?", default=False):
        format_info("Nothing deleted")
        raise typer.Exit(0)
    count = get_history_service().clear_history()
    format_warning(f"Removed {count} session(s)")


@app.command("projects")
@command_wrapper
def projects(
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """List projects used in logged sessions."""
    names = list_projects(get_history_service().list_sessions())
    if output in ("json", "yaml"):
        format_output(names, output)
    elif not names:
        format_info("No projects yet")
    else:
        for name in names:
            console.print(name)


@app.command("tags")
@command_wrapper
def tags(
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """List tags used in logged sessions."""
    names = list_tags(get_history_service().list_sessions())
    if output in ("json", "yaml"):
        format_output(names, output)
    elif not names:
        format_info("No tags yet")
    else:
        for name in names:
            console.print(name)
