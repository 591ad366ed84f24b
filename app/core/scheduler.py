"""Oura sync scheduler using APScheduler.

Fires the full sync (daily scores, then workouts, for yesterday) at fixed
local wall-clock times, 10:00, 22:00 and 23:55 by default.
"""
import logging
import threading
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from app.core.config import Settings
from app.core.db import Database
from app.core.oura_client import OuraClient
from app.core.sync import SyncReport, run_sync, yesterday

logger = logging.getLogger(__name__)


def parse_sync_times(times: List[str]) -> List[Tuple[int, int]]:
    """["10:00", "23:55"] -> [(10, 0), (23, 55)]."""
    parsed = []
    for value in times:
        hour_str, _, minute_str = value.strip().partition(":")
        hour, minute = int(hour_str), int(minute_str or 0)
        if not (0 <= hour < 24 and 0 <= minute < 60):
            raise ValueError(f"Invalid sync time: {value!r}")
        parsed.append((hour, minute))
    return parsed


class SyncScheduler:
    """Runs the Oura sync on a daily cron schedule.

    Usage:
        scheduler = SyncScheduler(database, settings)
        scheduler.start()
        # ... app runs ...
        scheduler.stop()
    """

    def __init__(
        self,
        database: Database,
        settings: Settings,
        client_factory: Optional[Callable[[Settings], OuraClient]] = None,
    ):
        self.database = database
        self.settings = settings
        self.client_factory = client_factory or OuraClient.from_settings
        self.scheduler: Optional[AsyncIOScheduler] = None
        self._sync_lock = threading.Lock()
        self._stopped = False

    @property
    def is_running(self) -> bool:
        return self.scheduler is not None and self.scheduler.running

    def start(self) -> None:
        """Register one cron job per configured time and start.

        Must be called from a running asyncio event loop.
        """
        if self.is_running:
            logger.warning("Sync scheduler is already running")
            return

        if not self.settings.SYNC_ENABLED:
            logger.info("Scheduled Oura sync is disabled in configuration")
            return

        if not self.settings.OURA_TOKEN:
            logger.warning("OURA_TOKEN not set; scheduled Oura sync will not run")
            return

        times = parse_sync_times(self.settings.SYNC_TIMES)
        tz = self.settings.SYNC_TIMEZONE

        self.scheduler = AsyncIOScheduler(timezone=tz) if tz else AsyncIOScheduler()
        for hour, minute in times:
            self.scheduler.add_job(
                self._run_scheduled,
                CronTrigger(hour=hour, minute=minute, timezone=tz),
                id=f"oura_sync_{hour:02d}{minute:02d}",
                name=f"Oura sync {hour:02d}:{minute:02d}",
                replace_existing=True,
                max_instances=1,
                coalesce=True,
            )

        self._stopped = False
        self.scheduler.start()
        logger.info(
            "Scheduled Oura sync at %s daily",
            ", ".join(f"{h:02d}:{m:02d}" for h, m in times),
        )

    def stop(self) -> None:
        """Shut down, then block until a sync already in progress has finished.

        APScheduler's asyncio executor cannot wait for a job running in its
        thread pool, so the wait happens on the sync lock instead.
        """
        if self.scheduler is None:
            return

        logger.info("Shutting down Oura sync scheduler...")
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        self.scheduler = None

        with self._sync_lock:
            self._stopped = True
        logger.info("Oura sync scheduler stopped")

    def scheduled_date(self, now: Optional[datetime] = None) -> str:
        """Yesterday as seen from the zone the cron fires in."""
        now = now or datetime.now(timezone.utc)
        tz = self.settings.SYNC_TIMEZONE
        local = now.astimezone(ZoneInfo(tz)) if tz else now.astimezone()
        return yesterday(local.date())

    def run_now(self, date: Optional[str] = None) -> SyncReport:
        """Run one full sync synchronously; raises MissingCredentialsError without a token."""
        with self.client_factory(self.settings) as client:
            return run_sync(self.database, client, date)

    def _run_scheduled(self) -> None:
        # APScheduler runs plain functions in its thread pool, off the event loop
        with self._sync_lock:
            if self._stopped:
                logger.info("Scheduler stopped; skipping Oura sync")
                return
            logger.info("Running scheduled Oura sync")
            try:
                self.run_now(self.scheduled_date())
            except Exception:
                logger.exception("Scheduled Oura sync failed")
