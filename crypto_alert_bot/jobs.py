"""
Periodic jobs: the alert sweep and the daily digest.
Each job is serialized against itself; a tick that finds the job still running is skipped.
"""

import asyncio
from datetime import datetime
from typing import Callable, Optional
from loguru import logger

from .alerts.alert_engine import AlertEngine
from .notifier import Notifier
from .reports.report_generator import ReportGenerator
from .reports.scheduler import ReportScheduler
from .users.user_storage import UserStore


class JobScheduler:
    """Runs the scheduled work against injected components"""

    def __init__(
        self,
        engine: AlertEngine,
        store: UserStore,
        generator: ReportGenerator,
        report_scheduler: ReportScheduler,
        notifier: Notifier,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.engine = engine
        self.store = store
        self.generator = generator
        self.report_scheduler = report_scheduler
        self.notifier = notifier
        self.clock = clock
        self._sweep_lock = asyncio.Lock()
        self._digest_lock = asyncio.Lock()

    async def run_alert_sweep(self) -> bool:
        """
        Run one alert sweep unless the previous one is still in progress.

        Returns:
            Whether a sweep ran
        """
        if self._sweep_lock.locked():
            logger.warning("Previous alert sweep still running, skipping this tick")
            return False

        async with self._sweep_lock:
            try:
                await self.engine.sweep()
            except Exception as e:
                logger.exception(f"Alert sweep failed: {e}")
        return True

    async def run_daily_digest(self, now: Optional[datetime] = None) -> int:
        """
        Send the daily report if it is due.

        Returns:
            Number of users the report was delivered to
        """
        if self._digest_lock.locked():
            logger.warning("Daily digest still running, skipping this tick")
            return 0

        async with self._digest_lock:
            now = now or self.clock()
            if not self.report_scheduler.is_daily_due(now):
                return 0

            # Mark first so a failure does not resend every minute
            self.report_scheduler.mark_daily_sent(now)
            return await self.send_daily_digest(now)

    async def send_daily_digest(self, now: Optional[datetime] = None) -> int:
        """
        Deliver the daily report to every subscribed user.
        Users are served independently; one failed delivery does not stop the rest.

        Returns:
            Number of successful deliveries
        """
        user_ids = self.store.daily_report_users()
        if not user_ids:
            logger.debug("No users subscribed to the daily report")
            return 0

        report = await self.generator.generate_daily_report(now)
        if report is None:
            return 0

        delivered = 0
        for user_id in user_ids:
            try:
                if await self.notifier.send(user_id, report):
                    delivered += 1
            except Exception as e:
                logger.error(f"Error delivering daily report to user {user_id}: {str(e)}")

        logger.info(f"Daily report delivered to {delivered}/{len(user_ids)} users")
        return delivered
