"""
Scheduler for reports.
Determines when the daily report should be generated.
"""

from datetime import datetime
from loguru import logger

from .models import ReportTime, ReportTracker


class ReportScheduler:
    """Decides when the daily report is due"""

    def __init__(self, report_time: ReportTime, grace_minutes: int = 30):
        """
        Initialize the report scheduler.

        Args:
            report_time: Time of day for the daily report
            grace_minutes: How long after report_time a delayed check may still send it
        """
        self.report_time = report_time
        self.grace_minutes = grace_minutes
        self.tracker = ReportTracker()
        logger.debug(f"Initialized ReportScheduler for {report_time.format_time()}")

    def is_daily_due(self, now: datetime) -> bool:
        """
        Check whether the daily report should run now.

        Due from the report time until the grace period ends, at most once
        per calendar day.
        """
        elapsed = self.report_time.minutes_since(now)
        if not 0 <= elapsed < self.grace_minutes:
            return False
        return self.tracker.last_daily != now.date()

    def mark_daily_sent(self, now: datetime) -> None:
        """Record that today's report went out"""
        self.tracker.last_daily = now.date()
