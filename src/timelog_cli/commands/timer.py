"""Timer commands - start, pause, resume, stop and watch the active timer.

Every command first runs one scheduler tick so that a phase which expired
while nothing was watching is advanced (or finalized) before the command
reads the timer.
"""

import typer
from rich.live import Live
from rich.prompt import Confirm

from timelog_cli.models.errors import NoActiveTimer
from timelog_cli.models.presets import get_preset, list_presets
from timelog_cli.models.timer import parse_tags
from timelog_cli.services.config_service import get_config_service, get_timer_service
from timelog_cli.services.scheduler import PhaseScheduler, TickOutcome
from timelog_cli.services.timer_service import TimerService
from timelog_cli.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND
from timelog_cli.utils.typer_helpers import SuggestingGroup
from timelog_cli.utils.ui.console import get_console
from timelog_cli.utils.ui.formatters import (
    build_summary,
    describe_timer,
    format_clock,
    format_error,
    format_info,
    format_output,
    format_success,
    format_warning,
)
from timelog_cli.utils.ui.timer_display import render_idle, render_timer

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Timer commands")
console = get_console()


def _report_tick(outcome: TickOutcome) -> None:
    if outcome.advance is not None:
        advance = outcome.advance
        format_info(f"{advance.message}. {advance.subtitle}")
        if advance.entry is not None:
            console.print(f"Logged {build_summary(advance.entry)}")
    elif outcome.stop is not None:
        format_info(f"Target reached. Logged {build_summary(outcome.stop.entry)}")


def _catch_up(service: TimerService) -> TickOutcome:
    outcome = PhaseScheduler(service).tick()
    _report_tick(outcome)
    return outcome


def _finished(outcome: TickOutcome) -> bool:
    """True when the catch-up tick already logged the timer."""
    if outcome.stop is not None:
        return True
    return outcome.advance is not None and outcome.advance.action == "completed"


def _show_timer(service: TimerService, output: str) -> None:
    timer = service.get_active_timer()
    if timer is not None:
        format_output(describe_timer(timer, service.clock.now_ms()), output)


# ----- Starting -----


@app.command("start")
@command_wrapper
def start_timer(
    title: str | None = typer.Argument(None, help="What you are working on"),
    project: str | None = typer.Option(None, "--project", "-p", help="Project name"),
    tags: str | None = typer.Option(
        None, "--tags", "-t", help="Comma-separated tags"
    ),
    target: float | None = typer.Option(
        None, "--target", "-m", help="Stop automatically after this many minutes"
    ),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """Start an open-ended timer."""
    service = get_timer_service()
    _catch_up(service)
    timer = service.start(
        {
            "mode": "open",
            "title": title,
            "project": project,
            "tags": parse_tags(tags),
            "target_duration_minutes": target,
        }
    )
    format_success(f"Started '{timer.title}'")
    _show_timer(service, output)


@app.command("pomodoro")
@command_wrapper
def start_pomodoro(
    title: str | None = typer.Argument(None, help="What you are working on"),
    focus: float | None = typer.Option(
        None, "--focus", "-f", help="Focus length in minutes"
    ),
    break_minutes: float | None = typer.Option(
        None, "--break", "-b", help="Break length in minutes"
    ),
    cycles: float | None = typer.Option(
        None, "--cycles", "-c", help="Number of focus blocks"
    ),
    project: str | None = typer.Option(None, "--project", "-p", help="Project name"),
    tags: str | None = typer.Option(
        None, "--tags", "-t", help="Comma-separated tags"
    ),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """Start a Pomodoro; lengths default to the configured values."""
    defaults = get_config_service().config.pomodoro
    service = get_timer_service()
    _catch_up(service)
    timer = service.start(
        {
            "mode": "pomodoro",
            "title": title,
            "project": project,
            "tags": parse_tags(tags),
            "pomodoro": {
                "focus_minutes": defaults.focus_minutes if focus is None else focus,
                "break_minutes": (
                    defaults.break_minutes if break_minutes is None else break_minutes
                ),
                "cycles": defaults.cycles if cycles is None else cycles,
            },
        }
    )
    format_success(f"Started '{timer.title}'")
    _show_timer(service, output)


@app.command("presets")
@command_wrapper
def presets(
    preset_id: str | None = typer.Argument(
        None, help="Preset to start; omit to list presets"
    ),
    project: str | None = typer.Option(None, "--project", "-p", help="Project name"),
    tags: str | None = typer.Option(
        None, "--tags", "-t", help="Comma-separated tags"
    ),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """List Pomodoro presets, or start one."""
    if preset_id is None:
        rows = [
            {
                "id": preset.id,
                "title": preset.title,
                "detail": preset.detail,
                "description": preset.description,
            }
            for preset in list_presets()
        ]
        format_output(rows, output)
        return

    preset = get_preset(preset_id)
    if preset is None:
        available = ", ".join(p.id for p in list_presets())
        format_error(f"Unknown preset '{preset_id}'. Available: {available}")
        raise typer.Exit(ERROR_NOT_FOUND)

    service = get_timer_service()
    _catch_up(service)
    timer = service.start(preset.to_payload(project=project, tags=parse_tags(tags)))
    format_success(f"Started '{timer.title}' ({preset.detail})")
    _show_timer(service, output)


# ----- Lifecycle -----


@app.command("pause")
@command_wrapper
def pause_timer() -> None:
    """Pause the running timer."""
    service = get_timer_service()
    _catch_up(service)
    timer = service.pause()
    format_success(f"Paused '{timer.title}'")


@app.command("resume")
@command_wrapper
def resume_timer() -> None:
    """Resume a paused timer."""
    service = get_timer_service()
    _catch_up(service)
    timer = service.resume()
    remaining = timer.remaining_ms(service.clock.now_ms())
    format_success(f"Resumed '{timer.title}'")
    if remaining is not None:
        console.print(f"[dim]{format_clock(remaining)} left[/dim]")


@app.command("stop")
@command_wrapper
def stop_timer() -> None:
    """Stop the timer and log it to history."""
    service = get_timer_service()
    if _finished(_catch_up(service)):
        return
    result = service.stop()
    format_success(f"Logged {build_summary(result.entry)}")


@app.command("cancel")
@command_wrapper
def cancel_timer(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Discard the timer without logging it."""
    service = get_timer_service()
    if _finished(_catch_up(service)):
        return

    timer = service.get_active_timer()
    if timer is None:
        raise NoActiveTimer()
    if not yes and not Confirm.ask(
        f"Discard '{timer.title}' without logging it?", default=False
    ):
        format_info("Timer kept")
        raise typer.Exit(0)

    discarded = service.cancel()
    format_warning(f"Discarded '{discarded.title}'")


@app.command("skip")
@command_wrapper
def skip_phase() -> None:
    """Skip the current Pomodoro phase."""
    service = get_timer_service()
    if _catch_up(service).changed:
        # The phase already ended on its own.
        return
    result = service.skip_phase()
    format_success(f"{result.message}. {result.subtitle}")
    if result.entry is not None:
        console.print(f"Logged {build_summary(result.entry)}")


@app.command("project")
@command_wrapper
def assign_project(
    name: str | None = typer.Argument(None, help="Project name"),
    clear: bool = typer.Option(False, "--clear", help="Remove the project"),
) -> None:
    """Set or clear the running timer's project."""
    if name is None and not clear:
        format_error("Give a project name or use --clear")
        raise typer.Exit(ERROR_INVALID_ARGS)

    service = get_timer_service()
    _catch_up(service)
    timer = service.assign_project(None if clear else name)
    if timer.project:
        format_success(f"Project set to '{timer.project}'")
    else:
        format_success("Project cleared")


# ----- Observing -----


@app.command("status")
@command_wrapper
def status(
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """Show the running timer."""
    service = get_timer_service()
    _catch_up(service)
    if service.get_active_timer() is None:
        format_info("No running timer")
        return
    _show_timer(service, output)


@app.command("watch")
@command_wrapper
def watch(
    interval: float | None = typer.Option(
        None, "--interval", "-i", help="Seconds between checks"
    ),
) -> None:
    """Show a live clock and advance phases as they expire."""
    service = get_timer_service()
    if service.get_active_timer() is None:
        raise NoActiveTimer()

    interval = interval or get_config_service().config.scheduler.tick_seconds
    scheduler = PhaseScheduler(service)

    try:
        with Live(
            render_idle("Starting..."),
            console=console,
            refresh_per_second=4,
            transient=True,
        ) as live:

            def on_tick(outcome: TickOutcome) -> None:
                _report_tick(outcome)
                if outcome.timer is not None:
                    live.update(render_timer(outcome.timer, service.clock.now_ms()))
                else:
                    live.update(render_idle())

            scheduler.run(interval=interval, on_tick=on_tick)
    except KeyboardInterrupt:
        console.print("\n[dim]Detached. Check the timer with 'timelog status'.[/dim]")
        return

    format_success("Session finished")
