"""
Portfolio valuation package.
Provides the valuation models and the valuator.
"""

from .models import EmptyPortfolio, PortfolioValuation, PositionValue
from .valuator import PortfolioValuator

__all__ = ["EmptyPortfolio", "PortfolioValuation", "PositionValue", "PortfolioValuator"]
