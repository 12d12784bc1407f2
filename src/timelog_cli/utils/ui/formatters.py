"""Output formatters for timers, durations and history entries."""

import json
from datetime import datetime
from typing import Any

import yaml
from rich.table import Table

from timelog_cli.models.timer import HistoryEntry, TimerState
from timelog_cli.utils.ui.console import get_console

console = get_console()


# ============================================================================
# Durations
# ============================================================================


def _split_seconds(ms: float) -> tuple[int, int, int]:
    total_seconds = max(0, int(ms // 1000))
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return hours, minutes, seconds


def format_clock(ms: float) -> str:
    """Format a duration as ``H:MM:SS``, or ``M:SS`` below one hour."""
    hours, minutes, seconds = _split_seconds(ms)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def format_readable_duration(ms: float) -> str:
    """Format a duration coarsely: ``1h 5m``, ``5m 3s`` or ``3s``."""
    hours, minutes, seconds = _split_seconds(ms)
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def format_timestamp(ms: int, fmt: str = "%Y-%m-%d %H:%M") -> str:
    """Render epoch milliseconds in local time."""
    return datetime.fromtimestamp(ms / 1000).strftime(fmt)


# ============================================================================
# History entries
# ============================================================================


def build_summary(entry: HistoryEntry) -> str:
    """One-line description of a finished session."""
    project = f" · {entry.project}" if entry.project else ""
    label = "Pomodoro" if entry.mode == "pomodoro" else "Timer"
    cycles = (
        f" ({entry.pomodoro_cycles} focus blocks)"
        if entry.mode == "pomodoro" and entry.pomodoro_cycles is not None
        else ""
    )
    return f"{label}{cycles}{project}: {format_readable_duration(entry.duration_ms)}"


def history_row(entry: HistoryEntry) -> dict[str, Any]:
    """Flatten an entry for table/json/yaml output."""
    return {
        "id": entry.id,
        "title": entry.title,
        "project": entry.project,
        "tags": entry.tags or [],
        "mode": entry.mode,
        "started": format_timestamp(entry.started_at),
        "duration": format_readable_duration(entry.duration_ms),
        "cycles": entry.pomodoro_cycles,
    }


def describe_timer(timer: TimerState, now: int) -> dict[str, Any]:
    """Key facts about the active timer for status output."""
    remaining = timer.remaining_ms(now)
    info: dict[str, Any] = {
        "title": timer.title,
        "project": timer.project,
        "tags": timer.tags or [],
        "mode": timer.mode,
        "status": "paused" if timer.is_paused else "running",
        "elapsed": format_clock(timer.session_elapsed_ms(now)),
    }
    if timer.pomodoro is not None:
        pomodoro = timer.pomodoro
        info["phase"] = pomodoro.phase
        info["focus_blocks"] = f"{pomodoro.completed_focus_blocks}/{pomodoro.cycles}"
    if remaining is not None:
        info["remaining"] = format_clock(remaining)
    return info


# ============================================================================
# Generic output
# ============================================================================


def format_output(data: Any, output_format: str = "table") -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str, ensure_ascii=False))
    elif output_format == "yaml":
        print(yaml.dump(data, default_flow_style=False, sort_keys=False))
    elif isinstance(data, list):
        format_dict_table(data)
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def _cell(value: Any) -> str:
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value) or "-"
    if value is None:
        return "-"
    return str(value)


def format_dict_table(items: list[dict], title: str | None = None) -> None:
    """Format a list of dictionaries as a table."""
    if not items:
        console.print("[yellow]No items found[/yellow]")
        return

    columns = list(items[0].keys())
    table = Table(title=title, show_header=True, header_style="bold magenta")
    for col in columns:
        table.add_column(col.replace("_", " ").title())

    for item in items:
        table.add_row(*(_cell(item.get(col)) for col in columns))

    console.print(table)


def format_single_item(item: dict) -> None:
    """Format a single item as key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in item.items():
        table.add_row(key.replace("_", " ").title(), _cell(value))

    console.print(table)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")
