"""Time-driven phase advancement.

``evaluate`` is a pure decision: given a timer and an instant it says whether
the current phase's budget is spent. ``PhaseScheduler.tick`` applies that
decision through the lifecycle engine, and ``PhaseScheduler.run`` is the loop
a long-running caller (the ``watch`` command) owns. Correctness only depends
on ``tick`` being called at least once per phase, not on the cadence.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from timelog_cli.models.timer import TimerState
from timelog_cli.services.timer_service import (
    PomodoroAdvanceResult,
    StopResult,
    TimerService,
)
from timelog_cli.utils.logger import get_logger

DEFAULT_TICK_SECONDS = 1.0


class SchedulerDecision(str, Enum):
    IDLE = "idle"  # no active timer
    PAUSED = "paused"  # paused timers are never expired
    RUNNING = "running"  # budget left, or no budget at all
    ADVANCE = "advance"  # pomodoro phase expired
    FINALIZE = "finalize"  # open timer reached its target


def evaluate(timer: TimerState | None, now: int) -> SchedulerDecision:
    """Decide what an expiry check at *now* should do."""
    if timer is None:
        return SchedulerDecision.IDLE
    if timer.is_paused:
        return SchedulerDecision.PAUSED

    remaining = timer.remaining_ms(now)
    if remaining is None or remaining > 0:
        return SchedulerDecision.RUNNING
    if timer.pomodoro is not None:
        return SchedulerDecision.ADVANCE
    return SchedulerDecision.FINALIZE


@dataclass(frozen=True)
class TickOutcome:
    """What a single scheduler tick observed and did."""

    decision: SchedulerDecision
    timer: TimerState | None
    advance: PomodoroAdvanceResult | None = None
    stop: StopResult | None = None

    @property
    def changed(self) -> bool:
        return self.advance is not None or self.stop is not None


class PhaseScheduler:
    """Periodic expiry checker driving the lifecycle engine."""

    def __init__(self, service: TimerService):
        self.service = service

    def tick(self) -> TickOutcome:
        """Re-read the active timer and trigger at most one transition."""
        with self.service.lock:
            timer = self.service.get_active_timer()
            decision = evaluate(timer, self.service.clock.now_ms())

            if decision is SchedulerDecision.ADVANCE:
                result = self.service.advance_pomodoro_phase(timer)
                return TickOutcome(decision, result.timer, advance=result)
            if decision is SchedulerDecision.FINALIZE:
                stopped = self.service.stop(timer)
                return TickOutcome(decision, None, stop=stopped)
            return TickOutcome(decision, timer)

    def run(
        self,
        interval: float = DEFAULT_TICK_SECONDS,
        on_tick: Callable[[TickOutcome], None] | None = None,
        should_continue: Callable[[TickOutcome], bool] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> TickOutcome:
        """Tick every *interval* seconds until *should_continue* says stop.

        Without *should_continue* the loop ends once no timer is active.
        Returns the last outcome.
        """
        logger = get_logger()
        logger.info("scheduler started (interval %.2fs)", interval)
        while True:
            outcome = self.tick()
            if outcome.advance is not None:
                logger.info(
                    "pomodoro advanced: %s (%s)",
                    outcome.advance.action,
                    outcome.advance.message,
                )
            elif outcome.stop is not None:
                logger.info("timer finalized: %s", outcome.stop.entry.id)

            if on_tick:
                on_tick(outcome)

            keep_going = (
                should_continue(outcome)
                if should_continue
                else outcome.decision is not SchedulerDecision.IDLE
                and outcome.timer is not None
            )
            if not keep_going:
                logger.info("scheduler stopped (%s)", outcome.decision.value)
                return outcome
            sleep(interval)
