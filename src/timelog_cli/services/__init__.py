"""Service layer for TimeLog CLI.

- timer_store: typed persistence gateway over a key/value store
- timer_service: the timer lifecycle engine
- scheduler: time-driven phase advancement
- history_service / report_service: history maintenance and reporting
"""

from .history_service import HistoryService, list_projects, list_tags
from .scheduler import PhaseScheduler, SchedulerDecision, TickOutcome, evaluate
from .timer_service import PomodoroAdvanceResult, StopResult, TimerService
from .timer_store import STORAGE_KEYS, TimerStore

__all__ = [
    "HistoryService",
    "list_projects",
    "list_tags",
    "PhaseScheduler",
    "SchedulerDecision",
    "TickOutcome",
    "evaluate",
    "PomodoroAdvanceResult",
    "StopResult",
    "TimerService",
    "STORAGE_KEYS",
    "TimerStore",
]
