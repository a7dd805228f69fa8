"""Drive the reminder engine on a fixed interval.

Two phases, RUNNING and SLEEPING. The first cycle runs immediately, then
one per interval forever. A failed cycle is logged and never stops the loop.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from logger import logger
from .engine import ReminderEngine

CHECK_INTERVAL = timedelta(hours=1)
JOB_ID = "appointment_reminders"


class LoopPhase(Enum):
    RUNNING = "running"
    SLEEPING = "sleeping"


class ReminderLoop:
    """Owns the current notified-ID set between cycles."""

    def __init__(
        self,
        engine: ReminderEngine,
        state: frozenset[int],
        interval: timedelta = CHECK_INTERVAL
    ):
        self.engine = engine
        self.state = state
        self.interval = interval
        self.phase = LoopPhase.RUNNING
        self.cycles = 0

    async def tick(self) -> None:
        """Run one cycle and keep whatever state it returns."""
        self.phase = LoopPhase.RUNNING
        logger.info("Checking for reminders")
        try:
            self.state = await self.engine.run_cycle(self.state)
        except Exception as e:
            logger.exception(f"Error processing potential reminders: {e}")
        finally:
            self.cycles += 1
            self.phase = LoopPhase.SLEEPING
        logger.debug(f"Sleeping for {self.interval}")

    def schedule(self, scheduler: AsyncIOScheduler) -> str:
        """Register the cycle as an interval job, first run now.

        Args:
            scheduler: APScheduler instance

        Returns:
            job_id
        """
        job = scheduler.add_job(
            self.tick,
            trigger=IntervalTrigger(seconds=self.interval.total_seconds()),
            id=JOB_ID,
            name="Appointment reminders",
            next_run_time=datetime.now(timezone.utc),
            max_instances=1,
            coalesce=True,
            replace_existing=True
        )
        logger.info(f"Registered reminder job: every {self.interval}")
        return job.id

    async def run(
        self,
        max_cycles: Optional[int] = None,
        sleep: Callable[[float], Awaitable] = asyncio.sleep
    ) -> None:
        """Plain tick/sleep loop without a scheduler.

        Args:
            max_cycles: Stop after this many cycles (forever if None)
            sleep: Coroutine function used to wait between cycles
        """
        remaining = max_cycles
        while remaining is None or remaining > 0:
            await self.tick()
            if remaining is not None:
                remaining -= 1
                if remaining == 0:
                    break
            await sleep(self.interval.total_seconds())
