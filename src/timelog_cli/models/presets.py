"""Built-in Pomodoro presets."""

from dataclasses import dataclass

from timelog_cli.models.timer import PomodoroSettings, StartTimerPayload


@dataclass(frozen=True)
class Preset:
    """A named, ready-to-start Pomodoro configuration."""

    id: str
    title: str
    description: str
    focus_minutes: int
    break_minutes: int
    cycles: int

    @property
    def detail(self) -> str:
        return (
            f"Focus {self.focus_minutes}m · Break {self.break_minutes}m · "
            f"{self.cycles} cycles"
        )

    def to_payload(
        self, project: str | None = None, tags: list[str] | None = None
    ) -> StartTimerPayload:
        """Build the start payload for this preset."""
        return StartTimerPayload(
            mode="pomodoro",
            title=self.title,
            project=project,
            tags=tags,
            pomodoro=PomodoroSettings(
                focus_minutes=self.focus_minutes,
                break_minutes=self.break_minutes,
                cycles=self.cycles,
            ),
        )


DEFAULT_PRESETS: dict[str, Preset] = {
    "classic": Preset("classic", "Pomodoro", "4 focus blocks", 25, 5, 4),
    "deep-work": Preset("deep-work", "Deep Work", "2 long blocks", 50, 10, 2),
    "express": Preset("express", "Speed Round", "Quick bursts", 15, 3, 6),
    "balanced": Preset("balanced", "Balanced Focus", "3 mid-length blocks", 40, 10, 3),
}


def get_preset(preset_id: str) -> Preset | None:
    return DEFAULT_PRESETS.get(preset_id)


def list_presets() -> list[Preset]:
    return list(DEFAULT_PRESETS.values())
