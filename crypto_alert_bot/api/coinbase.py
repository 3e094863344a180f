"""
Asynchronous client for the Coinbase Exchange public market data API.
"""

from typing import Dict, Any
from loguru import logger

from ..config import COINBASE_API_BASE, REQUEST_TIMEOUT
from .base import AsyncBaseAPI


class AsyncCoinbaseAPI(AsyncBaseAPI):
    """Client for public Coinbase Exchange endpoints (no authentication)"""

    def __init__(self, base_url: str = COINBASE_API_BASE, timeout: float = REQUEST_TIMEOUT):
        super().__init__(base_url=base_url, timeout=timeout)
        logger.debug("Initialized AsyncCoinbaseAPI")

    async def get_ticker(self, product_id: str) -> Dict[str, Any]:
        """
        Get the latest ticker for a product.

        Args:
            product_id: Coinbase product, e.g. "BTC-USD"

        Returns:
            Raw ticker with string fields "price", "volume", "bid", "ask", ...
        """
        return await self.get(f"products/{product_id}/ticker")
