"""
Data models for portfolio valuation.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class PositionValue:
    """Valuation of one held coin"""
    symbol: str
    name: str
    quantity: float
    price: float
    change_24h: Optional[float] = None
    value: float = 0.0

    def __post_init__(self):
        """Calculate value if not provided"""
        if self.value == 0.0:
            self.value = self.quantity * self.price


@dataclass
class PortfolioValuation:
    """Valued positions of a user's portfolio"""
    positions: List[PositionValue] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def total_value(self) -> float:
        """Sum of all valued positions"""
        return sum(position.value for position in self.positions)


@dataclass(frozen=True)
class EmptyPortfolio:
    """The user has no non-zero holdings"""
    user_id: int
