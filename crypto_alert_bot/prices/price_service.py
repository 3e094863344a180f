"""
Price service for cryptocurrency quotes.
Wraps the upstream providers behind a single fetch interface that never raises.
"""

import asyncio
import math
from typing import Dict, Any, Iterable, List, Mapping, Optional, Union
from loguru import logger

from ..api.coinbase import AsyncCoinbaseAPI
from ..api.coingecko import AsyncCoinGeckoAPI
from ..api.request_utilities import APIError
from .models import Coin, DetailedQuote, PriceTick, Unavailable


TickResult = Union[PriceTick, Unavailable]
QuoteResult = Union[DetailedQuote, Unavailable]


class PriceService:
    """
    Service for fetching current cryptocurrency prices.

    Plain ticks come from Coinbase. Detailed quotes try CoinGecko first and
    fall back to the Coinbase ticker without change and market cap data.
    Failures come back as Unavailable; retrying is left to the next poll.
    """

    def __init__(
        self,
        coins: Mapping[str, Coin],
        coinbase: Optional[AsyncCoinbaseAPI] = None,
        coingecko: Optional[AsyncCoinGeckoAPI] = None,
        timeout: float = 15,
    ):
        """
        Initialize the price service.

        Args:
            coins: Supported coin table keyed by symbol
            coinbase: Coinbase client (created if not given)
            coingecko: CoinGecko client (created if not given)
            timeout: Upper bound in seconds for one fetch, including executor wait
        """
        self.coins = coins
        self.coinbase = coinbase or AsyncCoinbaseAPI()
        self.coingecko = coingecko or AsyncCoinGeckoAPI()
        self.timeout = timeout
        logger.debug(f"PriceService initialized for {len(coins)} coins")

    async def fetch_price(self, symbol: str) -> TickResult:
        """
        Get the current Coinbase ticker for a symbol.

        Args:
            symbol: Supported coin symbol, e.g. "BTC"

        Returns:
            PriceTick, or Unavailable on any failure
        """
        coin = self.coins.get(symbol.upper())
        if coin is None:
            return Unavailable(symbol.upper(), "unsupported symbol")

        data = await self._call(symbol, self.coinbase.get_ticker(coin.coinbase_id))
        if isinstance(data, Unavailable):
            return data

        try:
            price = float(data["price"])
            volume = float(data.get("volume") or 0.0)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Malformed Coinbase ticker for {coin.symbol}: {e}")
            return Unavailable(coin.symbol, "malformed ticker")

        if not math.isfinite(price) or price < 0:
            logger.warning(f"Coinbase returned invalid price for {coin.symbol}: {price}")
            return Unavailable(coin.symbol, "invalid price")

        return PriceTick(symbol=coin.symbol, price=price, volume=volume)

    async def fetch_detailed_quote(self, symbol: str) -> QuoteResult:
        """
        Get price and 24h statistics for a symbol.

        Args:
            symbol: Supported coin symbol

        Returns:
            DetailedQuote (possibly without change and market cap), or Unavailable
        """
        coin = self.coins.get(symbol.upper())
        if coin is None:
            return Unavailable(symbol.upper(), "unsupported symbol")

        quote = await self._fetch_gecko_quote(coin)
        if not isinstance(quote, Unavailable):
            return quote

        logger.info(f"CoinGecko quote for {coin.symbol} unavailable ({quote.reason}), falling back to Coinbase")
        tick = await self.fetch_price(coin.symbol)
        if isinstance(tick, Unavailable):
            return tick

        return DetailedQuote(
            symbol=coin.symbol,
            name=coin.name,
            price=tick.price,
            volume_24h=tick.volume * tick.price,
        )

    async def fetch_prices(self, symbols: Iterable[str]) -> Dict[str, TickResult]:
        """Fetch ticks for several symbols concurrently"""
        symbols = list(symbols)
        results = await asyncio.gather(*(self.fetch_price(s) for s in symbols))
        return dict(zip(symbols, results))

    async def fetch_detailed_quotes(self, symbols: Iterable[str]) -> Dict[str, QuoteResult]:
        """Fetch detailed quotes for several symbols concurrently"""
        symbols = list(symbols)
        results = await asyncio.gather(*(self.fetch_detailed_quote(s) for s in symbols))
        return dict(zip(symbols, results))

    async def _fetch_gecko_quote(self, coin: Coin) -> QuoteResult:
        data = await self._call(coin.symbol, self.coingecko.get_simple_price(coin.gecko_id))
        if isinstance(data, Unavailable):
            return data

        try:
            entry = data[coin.gecko_id]
            price = float(entry["usd"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Malformed CoinGecko response for {coin.symbol}: {e}")
            return Unavailable(coin.symbol, "malformed quote")

        if not math.isfinite(price) or price < 0:
            return Unavailable(coin.symbol, "invalid price")

        return DetailedQuote(
            symbol=coin.symbol,
            name=coin.name,
            price=price,
            change_24h=_optional_float(entry.get("usd_24h_change")),
            market_cap=_optional_float(entry.get("usd_market_cap")),
            volume_24h=_optional_float(entry.get("usd_24h_vol")),
        )

    async def _call(self, symbol: str, request) -> Union[Any, Unavailable]:
        """Await a provider request, turning errors and timeouts into Unavailable"""
        try:
            return await asyncio.wait_for(request, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Quote request for {symbol} timed out after {self.timeout}s")
            return Unavailable(symbol, "timeout")
        except APIError as e:
            if e.status_code == 429:
                logger.warning(f"Rate limited while fetching {symbol}")
                return Unavailable(symbol, "rate limited")
            logger.warning(f"Error fetching price for {symbol}: {e.message}")
            return Unavailable(symbol, "provider error")
        except Exception as e:
            logger.error(f"Unexpected error fetching price for {symbol}: {str(e)}")
            return Unavailable(symbol, "provider error")


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
