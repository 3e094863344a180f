"""
Data models for price lookups.
Defines supported coins, price ticks and detailed quotes.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Coin:
    """A supported cryptocurrency and its provider identifiers"""
    symbol: str
    name: str
    coinbase_id: str
    gecko_id: str

    @property
    def label(self) -> str:
        """Display label, e.g. "Bitcoin (BTC)" """
        return f"{self.name} ({self.symbol})"


@dataclass(frozen=True)
class PriceTick:
    """One polled price observation"""
    symbol: str
    price: float
    volume: float = 0.0


@dataclass(frozen=True)
class DetailedQuote:
    """Price with 24h statistics. Fields are None when the provider did not supply them."""
    symbol: str
    name: str
    price: float
    change_24h: Optional[float] = None
    market_cap: Optional[float] = None
    volume_24h: Optional[float] = None


@dataclass(frozen=True)
class Unavailable:
    """A quote could not be fetched"""
    symbol: str
    reason: str = "unavailable"
