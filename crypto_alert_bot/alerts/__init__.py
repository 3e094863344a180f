"""
Price alerts package.
Provides crossing detection and the alert sweep.
"""

from .alert_engine import AlertEngine, FiredAlert, is_crossing

__all__ = ["AlertEngine", "FiredAlert", "is_crossing"]
