"""Live timer panel used by the ``watch`` command."""

from rich.align import Align
from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from timelog_cli.models.timer import TimerState
from timelog_cli.utils.ui.formatters import format_clock

BAR_WIDTH = 40


def _header(timer: TimerState) -> tuple[str, str]:
    if timer.is_paused:
        return "PAUSED", "yellow"
    if timer.pomodoro is not None:
        pomodoro = timer.pomodoro
        block = min(pomodoro.completed_focus_blocks + 1, pomodoro.cycles)
        if pomodoro.phase == "break":
            return f"BREAK after block {pomodoro.completed_focus_blocks}", "green"
        return f"FOCUS {block}/{pomodoro.cycles}", "cyan"
    return "TIMER", "cyan"


def _clock_color(timer: TimerState, remaining: int | None) -> str:
    if timer.is_paused:
        return "yellow"
    if remaining is None:
        return "cyan"
    if remaining < 60_000:
        return "red"
    if remaining < 300_000:
        return "yellow"
    return "cyan"


def _progress_bar(timer: TimerState, now: int) -> Text | None:
    budget = timer.phase_budget_ms
    if not budget:
        return None
    elapsed = timer.phase_elapsed_ms(now)
    progress_pct = max(0, min(100, int(elapsed / budget * 100)))
    filled = int(BAR_WIDTH * progress_pct / 100)
    bar = "▓" * filled + "░" * (BAR_WIDTH - filled)
    return Text(f"{bar}  {progress_pct}%", style="dim", justify="center")


def render_timer(timer: TimerState, now: int) -> Panel:
    """Render the active timer as a panel.

    Bounded phases count down; open timers without a target count up.
    """
    title, color = _header(timer)
    remaining = timer.remaining_ms(now)

    components = [Text(timer.title, style="bold white", justify="center")]
    if timer.project:
        components.append(Text(timer.project, style="dim", justify="center"))
    components.append(Text(""))

    shown = remaining if remaining is not None else timer.session_elapsed_ms(now)
    components.append(
        Text(
            format_clock(shown),
            style=f"bold {_clock_color(timer, remaining)}",
            justify="center",
        )
    )

    bar = _progress_bar(timer, now)
    if bar is not None:
        components.append(Text(""))
        components.append(bar)

    if timer.is_paused and timer.paused_at is not None:
        components.append(Text(""))
        components.append(
            Text(
                f"Paused for: {format_clock(now - timer.paused_at)}",
                style="yellow dim",
                justify="center",
            )
        )

    return Panel(
        Align.center(Group(*components)),
        title=Text(title, style=f"bold {color}"),
        subtitle=Text("Ctrl+C to detach", style="dim"),
        border_style=color,
    )


def render_idle(message: str = "No running timer") -> Panel:
    return Panel(Align.center(Text(message, style="dim")), border_style="dim")
