"""
Cancellable periodic timers on top of the schedule library.

Each host owns its own schedule.Scheduler and pumps it with run_pending();
nothing here touches the module-level default scheduler.
"""

import logging
import time
from typing import Callable, Optional

import schedule

logger = logging.getLogger(__name__)

# Upper bound on how long run_scheduler sleeps between run_pending() calls
SCHEDULER_LOOP_SLEEP_SECONDS = 0.01


class TickTimer:
    """
    A single repeating job that can be started and cancelled any number of times.

    After cancel() returns the callback never runs again for that start(),
    even if the scheduler already picked the job up in the current
    run_pending() pass (e.g. when another job cancels this one).
    """

    def __init__(
        self,
        scheduler: schedule.Scheduler,
        interval_seconds: float,
        callback: Callable[[], None],
        name: str = "tick"
    ):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self.scheduler = scheduler
        self.interval_seconds = interval_seconds
        self.callback = callback
        self.name = name
        self._job: Optional[schedule.Job] = None
        self._generation = 0

    @property
    def active(self) -> bool:
        return self._job is not None

    def start(self) -> None:
        if self._job is not None:
            return
        self._generation += 1
        self._job = (
            self.scheduler.every(self.interval_seconds)
            .seconds.do(self._fire, self._generation)
            .tag(self.name)
        )
        logger.debug(f"Started timer '{self.name}' every {self.interval_seconds}s")

    def cancel(self) -> None:
        if self._job is None:
            return
        self.scheduler.cancel_job(self._job)
        self._job = None
        logger.debug(f"Cancelled timer '{self.name}'")

    def _fire(self, generation: int) -> None:
        # Stale firing from a cancelled start()
        if self._job is None or generation != self._generation:
            return
        self.callback()


def run_scheduler(
    scheduler: schedule.Scheduler,
    should_continue: Callable[[], bool],
    max_sleep: float = SCHEDULER_LOOP_SLEEP_SECONDS
) -> None:
    """
    Pump the scheduler until should_continue() returns False or no jobs remain.
    """
    while should_continue() and scheduler.jobs:
        scheduler.run_pending()
        idle = scheduler.idle_seconds
        if idle is None:
            break
        time.sleep(min(max(idle, 0.0), max_sleep))
