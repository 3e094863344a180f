"""
Market reports package.
Provides the market overview, the daily digest and its timing.
"""

from .models import ReportTime, ReportTracker
from .report_generator import ReportGenerator
from .scheduler import ReportScheduler

__all__ = ["ReportTime", "ReportTracker", "ReportGenerator", "ReportScheduler"]
