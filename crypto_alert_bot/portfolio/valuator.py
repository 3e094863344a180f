"""
Valuator for user portfolios.
Prices every non-zero holding with a detailed quote.
"""

from typing import Union
from loguru import logger

from ..prices.models import Unavailable
from ..prices.price_service import PriceService
from ..users.user_storage import UserStore
from .models import EmptyPortfolio, PortfolioValuation, PositionValue


class PortfolioValuator:
    """Computes the current value of a user's holdings"""

    def __init__(self, store: UserStore, price_service: PriceService):
        """
        Initialize with required services.

        Args:
            store: User store holding the portfolios
            price_service: Source of detailed quotes
        """
        self.store = store
        self.price_service = price_service
        logger.debug("Initialized PortfolioValuator")

    async def valuate(self, user_id: int) -> Union[PortfolioValuation, EmptyPortfolio]:
        """
        Value a user's portfolio at current prices.

        Coins whose quote is unavailable are left out of both the positions
        and the total.

        Args:
            user_id: User whose holdings to value

        Returns:
            PortfolioValuation, or EmptyPortfolio when nothing is held
        """
        holdings = {s: q for s, q in self.store.get_holdings(user_id).items() if q > 0}
        if not holdings:
            return EmptyPortfolio(user_id)

        # Quotes are fetched without holding the store lock
        quotes = await self.price_service.fetch_detailed_quotes(holdings.keys())

        valuation = PortfolioValuation()
        for symbol, quantity in holdings.items():
            quote = quotes[symbol]
            if isinstance(quote, Unavailable):
                logger.warning(f"Skipping {symbol} in portfolio of user {user_id}: {quote.reason}")
                valuation.skipped.append(symbol)
                continue

            valuation.positions.append(PositionValue(
                symbol=symbol,
                name=quote.name,
                quantity=quantity,
                price=quote.price,
                change_24h=quote.change_24h,
            ))

        logger.debug(f"Valued portfolio of user {user_id} at ${valuation.total_value:.2f}")
        return valuation
