"""Period summaries and CSV/JSON export of session history.

Period boundaries use naive local time; weeks start on Monday.
"""

from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Literal

from timelog_cli.models.timer import HistoryEntry

PeriodType = Literal["this-week", "last-week", "this-month", "last-month"]
PERIODS: tuple[str, ...] = ("this-week", "last-week", "this-month", "last-month")
NO_PROJECT = "No Project"

CSV_HEADER = [
    "Title",
    "Project",
    "Tags",
    "Mode",
    "Started",
    "Ended",
    "Duration (min)",
    "Pomodoro Cycles",
]


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    def contains(self, ms: int) -> bool:
        instant = datetime.fromtimestamp(ms / 1000)
        return self.start <= instant <= self.end


@dataclass(frozen=True)
class ProjectBreakdown:
    project: str
    total_ms: int
    session_count: int
    percentage: float


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min)


def _day_end(day: date) -> datetime:
    return datetime.combine(day, time.max)


def get_period_range(period: PeriodType, today: date | None = None) -> DateRange:
    """Return the inclusive local-time range for a named period."""
    today = today or date.today()

    if period == "this-week":
        start = today - timedelta(days=today.weekday())
        return DateRange(_day_start(start), _day_end(start + timedelta(days=6)))
    if period == "last-week":
        start = today - timedelta(days=today.weekday() + 7)
        return DateRange(_day_start(start), _day_end(start + timedelta(days=6)))
    if period == "this-month":
        start = today.replace(day=1)
        next_month = (start + timedelta(days=32)).replace(day=1)
        return DateRange(_day_start(start), _day_end(next_month - timedelta(days=1)))
    if period == "last-month":
        end = today.replace(day=1) - timedelta(days=1)
        return DateRange(_day_start(end.replace(day=1)), _day_end(end))
    raise ValueError(f"Unknown period: {period}")


def filter_sessions_by_range(
    history: list[HistoryEntry], date_range: DateRange
) -> list[HistoryEntry]:
    return [entry for entry in history if date_range.contains(entry.started_at)]


def total_duration_ms(history: list[HistoryEntry]) -> int:
    return sum(entry.duration_ms for entry in history)


def get_project_breakdown(history: list[HistoryEntry]) -> list[ProjectBreakdown]:
    """Time per project, largest first."""
    totals: dict[str, list[int]] = {}
    for entry in history:
        bucket = totals.setdefault(entry.project or NO_PROJECT, [0, 0])
        bucket[0] += entry.duration_ms
        bucket[1] += 1

    grand_total = total_duration_ms(history)
    breakdown = [
        ProjectBreakdown(
            project=project,
            total_ms=total,
            session_count=count,
            percentage=round(total / grand_total * 100, 1) if grand_total else 0.0,
        )
        for project, (total, count) in totals.items()
    ]
    return sorted(breakdown, key=lambda item: (-item.total_ms, item.project.casefold()))


def _iso(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000).isoformat(timespec="seconds")


def export_to_csv(history: list[HistoryEntry]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for entry in history:
        writer.writerow(
            [
                entry.title,
                entry.project or "",
                ";".join(entry.tags or []),
                entry.mode,
                _iso(entry.started_at),
                _iso(entry.ended_at),
                round(entry.duration_ms / 60000, 1),
                "" if entry.pomodoro_cycles is None else entry.pomodoro_cycles,
            ]
        )
    return buffer.getvalue()


def export_to_json(history: list[HistoryEntry]) -> str:
    rows = []
    for entry in history:
        row = entry.to_dict()
        row["startedAt"] = _iso(entry.started_at)
        row["endedAt"] = _iso(entry.ended_at)
        rows.append(row)
    return json.dumps(rows, indent=2, ensure_ascii=False)
