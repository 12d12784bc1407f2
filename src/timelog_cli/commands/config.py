"""Configuration management commands."""

import typer
from pydantic import ValidationError

from timelog_cli.services.config_service import get_config_service
from timelog_cli.utils.exit_codes import ERROR_GENERAL, ERROR_INVALID_ARGS
from timelog_cli.utils.typer_helpers import SuggestingGroup
from timelog_cli.utils.ui.console import get_console
from timelog_cli.utils.ui.formatters import format_error, format_output, format_success

app = typer.Typer(cls=SuggestingGroup, help="Configuration management commands")
console = get_console()


def _parse_value(value: str) -> str | int | bool:
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit():
        return int(value)
    return value


@app.command("view")
def view_config(
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """View current configuration."""
    try:
        config_service = get_config_service()
        format_output(config_service.config.model_dump(), output)
    except Exception as e:
        format_error(f"Failed to view config: {str(e)}")
        raise typer.Exit(ERROR_GENERAL) from e


@app.command("get")
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., pomodoro.cycles)"),
) -> None:
    """Get a configuration value."""
    value = get_config_service().get(key)
    if value is None:
        format_error(f"Configuration key '{key}' not found")
        raise typer.Exit(ERROR_INVALID_ARGS)
    if hasattr(value, "model_dump"):
        format_output(value.model_dump())
    else:
        console.print(value)


@app.command("set")
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., pomodoro.cycles)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    parsed_value = _parse_value(value)
    try:
        get_config_service().set(key, parsed_value)
    except KeyError as e:
        format_error(f"Configuration key '{key}' not found")
        raise typer.Exit(ERROR_INVALID_ARGS) from e
    except ValidationError as e:
        reasons = "; ".join(err["msg"] for err in e.errors())
        format_error(f"Invalid value for '{key}': {reasons}")
        raise typer.Exit(ERROR_INVALID_ARGS) from e
    format_success(f"Configuration '{key}' set to '{parsed_value}'")


@app.command("reset")
def reset_config(
    key: str | None = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes:
        msg = "entire configuration" if not key else f"'{key}'"
        if not typer.confirm(f"Are you sure you want to reset {msg}?"):
            format_error("Cancelled")
            raise typer.Exit(0)

    try:
        get_config_service().reset(key)
    except KeyError as e:
        format_error(f"Configuration key '{key}' not found")
        raise typer.Exit(ERROR_INVALID_ARGS) from e

    if key:
        format_success(f"Configuration '{key}' reset to default")
    else:
        format_success("Configuration reset to defaults")
