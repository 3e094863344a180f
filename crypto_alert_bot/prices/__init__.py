"""
Price lookup package.
Provides the quote models and the price source adapter over upstream providers.
"""

from .models import Coin, DetailedQuote, PriceTick, Unavailable

__all__ = ["Coin", "DetailedQuote", "PriceTick", "Unavailable"]
