"""
Generator for market reports.
Builds the market overview and the daily digest text.
"""

from datetime import datetime
from typing import Iterable, List, Optional
from loguru import logger

from ..prices.models import Unavailable
from ..prices.price_service import PriceService
from ..utils.format_utilities import format_market_cap, format_percentage, format_price


class ReportGenerator:
    """Generator for market summaries over a watch list"""

    def __init__(self, price_service: PriceService, watchlist: Iterable[str]):
        """
        Initialize the report generator.

        Args:
            price_service: Source of detailed quotes
            watchlist: Symbols covered by the reports
        """
        self.price_service = price_service
        self.watchlist: List[str] = list(watchlist)
        logger.debug(f"Initialized ReportGenerator for {', '.join(self.watchlist)}")

    async def generate_market_overview(self, now: Optional[datetime] = None) -> Optional[str]:
        """
        Market overview with price, 24h change and market cap.

        Returns:
            Report text, or None if no quote could be fetched
        """
        now = now or datetime.now()
        lines = await self._quote_lines(include_market_cap=True)
        if not lines:
            return None
        return "📈 Crypto market overview:\n\n" + "".join(lines) + f"🕐 Updated: {now.strftime('%H:%M:%S')}"

    async def generate_daily_report(self, now: Optional[datetime] = None) -> Optional[str]:
        """
        Daily digest with price and 24h change.

        Returns:
            Report text, or None if no quote could be fetched
        """
        now = now or datetime.now()
        lines = await self._quote_lines(include_market_cap=False)
        if not lines:
            logger.warning("Could not retrieve any quotes for the daily report")
            return None
        return "📊 Daily market report:\n\n" + "".join(lines) + f"📅 {now.strftime('%Y-%m-%d')}"

    async def _quote_lines(self, include_market_cap: bool) -> List[str]:
        quotes = await self.price_service.fetch_detailed_quotes(self.watchlist)

        lines = []
        for symbol in self.watchlist:
            quote = quotes[symbol]
            if isinstance(quote, Unavailable):
                logger.warning(f"Leaving {symbol} out of report: {quote.reason}")
                continue

            text = f"{quote.name} ({symbol}):\n"
            text += f"  💰 {format_price(quote.price)}\n"
            text += f"  {format_percentage(quote.change_24h)}\n"
            if include_market_cap:
                text += f"  📊 Market cap: {format_market_cap(quote.market_cap)}\n"
            lines.append(text + "\n")

        return lines
