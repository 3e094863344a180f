"""
Data models for scheduled reports.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass
class ReportTime:
    """Time of day a report goes out"""
    hour: int = 9
    minute: int = 0

    @classmethod
    def parse(cls, value: str) -> "ReportTime":
        """
        Parse an "HH:MM" string.

        Raises:
            ValueError: If the value is not a valid 24-hour time
        """
        hour, minute = map(int, value.split(":"))
        if not (0 <= hour < 24 and 0 <= minute < 60):
            raise ValueError(f"Invalid report time: {value}")
        return cls(hour=hour, minute=minute)

    def format_time(self) -> str:
        """Format the report time as HH:MM"""
        return f"{self.hour:02d}:{self.minute:02d}"

    def minutes_since(self, current_time: datetime) -> int:
        """Minutes elapsed since the report time on current_time's day (negative before it)"""
        return (current_time.hour * 60 + current_time.minute) - (self.hour * 60 + self.minute)


@dataclass
class ReportTracker:
    """Tracks when the daily report was last sent"""
    last_daily: Optional[date] = None
