"""
Asynchronous client for the CoinGecko public API.
"""

from typing import Dict, Any
from loguru import logger

from ..config import COINGECKO_API_BASE, REQUEST_TIMEOUT
from .base import AsyncBaseAPI


class AsyncCoinGeckoAPI(AsyncBaseAPI):
    """Client for the free CoinGecko endpoints"""

    def __init__(self, base_url: str = COINGECKO_API_BASE, timeout: float = REQUEST_TIMEOUT):
        super().__init__(base_url=base_url, timeout=timeout)
        logger.debug("Initialized AsyncCoinGeckoAPI")

    async def get_simple_price(self, gecko_id: str, vs_currency: str = "usd") -> Dict[str, Any]:
        """
        Get price, 24h change, market cap and 24h volume for a coin.

        Args:
            gecko_id: CoinGecko coin id, e.g. "bitcoin"
            vs_currency: Quote currency

        Returns:
            Raw response keyed by coin id, e.g.
            {"bitcoin": {"usd": 50000, "usd_24h_change": 1.2, ...}}
        """
        params = {
            "ids": gecko_id,
            "vs_currencies": vs_currency,
            "include_24hr_change": "true",
            "include_market_cap": "true",
            "include_24hr_vol": "true",
        }
        return await self.get("simple/price", params=params)
