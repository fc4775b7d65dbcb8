"""
Cleanup Scheduler
Fires the cleanup runner on fixed wall-clock schedules in one timezone
"""
import asyncio
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence
from zoneinfo import ZoneInfo

from core.clock import Clock, utc_now
from core.logging_config import logger

from .engine import CleanupSummary

CleanupRunner = Callable[[], Awaitable[CleanupSummary]]
Sleep = Callable[[float], Awaitable[None]]


class DailySchedule:
    """Once a day at hour:minute local time"""

    def __init__(self, hour: int, minute: int = 0):
        self.hour = hour
        self.minute = minute
        self.name = "daily"

    def next_fire(self, now: datetime) -> datetime:
        """First fire time strictly after now (now is tz-aware, local)"""
        candidate = now.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)
        if candidate <= now:
            candidate += timedelta(days=1)
        return candidate

    def describe(self) -> str:
        return f"daily at {self.hour:02d}:{self.minute:02d}"


class IntervalSchedule:
    """Every N hours on the hour, aligned to local midnight"""

    def __init__(self, hours: int):
        if hours <= 0 or 24 % hours != 0:
            raise ValueError("hours must be a positive divisor of 24")
        self.hours = hours
        self.name = f"every-{hours}h"

    def next_fire(self, now: datetime) -> datetime:
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        next_hour = (now.hour // self.hours + 1) * self.hours
        return midnight + timedelta(hours=next_hour)

    def describe(self) -> str:
        return f"every {self.hours} hours"


class CleanupScheduler:
    """Background timer for the cleanup sweep

    Each schedule runs in its own asyncio task. A failed run is logged and
    the schedule keeps going. run_now() is the on-demand entry point.
    """

    def __init__(
        self,
        runner: CleanupRunner,
        schedules: Sequence,
        timezone: str = "Asia/Jakarta",
        clock: Clock = utc_now,
        sleep: Sleep = asyncio.sleep,
    ):
        self.runner = runner
        self.schedules = list(schedules)
        self.timezone = ZoneInfo(timezone)
        self.clock = clock
        self.sleep = sleep
        self.running = False
        self.last_run: Optional[Dict[str, Any]] = None
        self._tasks: List[asyncio.Task] = []

    def start(self) -> None:
        """Start one loop per schedule"""
        if self.running:
            return
        self.running = True
        self._tasks = [asyncio.create_task(self._loop(schedule)) for schedule in self.schedules]
        logger.info(
            f"Cleanup scheduler started ({', '.join(s.describe() for s in self.schedules)}, "
            f"tz={self.timezone.key})"
        )

    async def stop(self) -> None:
        """Cancel the schedule loops and wait for them"""
        logger.info("Stopping cleanup scheduler...")
        self.running = False
        for task in self._tasks:
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info("Cleanup scheduler stopped")

    async def run_now(self, trigger: str = "manual") -> CleanupSummary:
        """Run the sweep immediately; errors propagate to the caller"""
        logger.info(f"Cleanup run triggered ({trigger})")
        summary = await self.runner()
        self.last_run = {
            "trigger": trigger,
            "startedAt": summary.started_at.isoformat(),
            "finishedAt": summary.finished_at.isoformat(),
            "deletedApplications": summary.deleted_applications,
            "deletedFiles": summary.deleted_files,
            "failed": summary.failed,
        }
        return summary

    def describe(self) -> Dict[str, Any]:
        now = self.local_now()
        return {
            "running": self.running,
            "timezone": self.timezone.key,
            "schedules": [
                {
                    "name": s.name,
                    "description": s.describe(),
                    "nextRun": s.next_fire(now).isoformat(),
                }
                for s in self.schedules
            ],
            "lastRun": self.last_run,
        }

    def local_now(self) -> datetime:
        return self.clock().astimezone(self.timezone)

    async def _loop(self, schedule) -> None:
        while self.running:
            now = self.local_now()
            fire_at = schedule.next_fire(now)
            delay = fire_at.timestamp() - now.timestamp()
            logger.debug(f"Next {schedule.name} cleanup at {fire_at.isoformat()}")

            await self.sleep(max(delay, 0))
            if not self.running:
                break

            try:
                await self.run_now(trigger=schedule.name)
            except Exception as e:
                logger.error(f"Scheduled cleanup ({schedule.name}) failed: {e}")
