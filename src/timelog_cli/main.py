"""Main entry point for TimeLog CLI."""

import typer

from timelog_cli import __version__
from timelog_cli.commands import config, export, history, report, timer
from timelog_cli.services.config_service import get_config_service
from timelog_cli.utils.typer_helpers import SuggestingGroup
from timelog_cli.utils.ui.console import get_console

# Create main app with custom group class
app = typer.Typer(
    name="timelog",
    cls=SuggestingGroup,
    help="Track work sessions and Pomodoros from the terminal",
    no_args_is_help=True,
)

console = get_console()


# Top-level timer and report commands
app.add_typer(timer.app)
app.add_typer(report.app)

# Add subcommands
app.add_typer(history.app, name="history", help="Logged sessions")
app.add_typer(export.app, name="export", help="Export sessions (csv, json)")
app.add_typer(config.app, name="config", help="Configuration management")


@app.callback()
def main_callback() -> None:
    """Track work sessions and Pomodoros from the terminal."""
    if not get_config_service().config.output.color:
        console.no_color = True


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]TimeLog CLI[/bold] version [cyan]{__version__}[/cyan]")


# Main entry point
def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
