import os
from typing import Dict, List, Optional, Set, Tuple

import pytest
from loguru import logger

from crypto_alert_bot.api.request_utilities import APIError
from crypto_alert_bot.config import SUPPORTED_COINS
from crypto_alert_bot.prices.price_service import PriceService
from crypto_alert_bot.users.user_storage import UserStore

# Configure logging for tests
logger.remove()
logger.add(lambda msg: print(msg, end=""), level="INFO")


class FakeCoinbaseAPI:
    """Coinbase client serving scripted tickers keyed by product id"""

    def __init__(self, prices: Optional[Dict[str, float]] = None):
        self.prices: Dict[str, float] = dict(prices or {})
        self.calls: List[str] = []

    def set_price(self, symbol: str, price: Optional[float]) -> None:
        """Set the next price for a symbol; None makes it unavailable"""
        product_id = f"{symbol}-USD"
        if price is None:
            self.prices.pop(product_id, None)
        else:
            self.prices[product_id] = price

    async def get_ticker(self, product_id: str):
        self.calls.append(product_id)
        if product_id not in self.prices:
            raise APIError(f"404 Not Found for {product_id}", status_code=404)
        return {"price": str(self.prices[product_id]), "volume": "10.0"}


class FakeCoinGeckoAPI:
    """CoinGecko client serving scripted quotes keyed by coin id"""

    def __init__(self, quotes: Optional[Dict[str, dict]] = None):
        self.quotes: Dict[str, dict] = dict(quotes or {})
        self.rate_limited = False
        self.calls: List[str] = []

    async def get_simple_price(self, gecko_id: str, vs_currency: str = "usd"):
        self.calls.append(gecko_id)
        if self.rate_limited:
            raise APIError("429 Too Many Requests", status_code=429)
        if gecko_id not in self.quotes:
            return {}
        return {gecko_id: self.quotes[gecko_id]}


class RecordingNotifier:
    """Notifier that records messages instead of sending them"""

    def __init__(self):
        self.messages: List[Tuple[int, str]] = []
        self.fail_for: Set[int] = set()

    async def send(self, user_id: int, text: str) -> bool:
        if user_id in self.fail_for:
            return False
        self.messages.append((user_id, text))
        return True

    def texts_for(self, user_id: int) -> List[str]:
        return [text for uid, text in self.messages if uid == user_id]


@pytest.fixture
def coins():
    return SUPPORTED_COINS


@pytest.fixture
def coinbase():
    return FakeCoinbaseAPI()


@pytest.fixture
def coingecko():
    return FakeCoinGeckoAPI()


@pytest.fixture
def price_service(coins, coinbase, coingecko):
    return PriceService(coins, coinbase=coinbase, coingecko=coingecko, timeout=5)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def data_file(tmp_path):
    return str(tmp_path / "user_data.json")


@pytest.fixture
def store(coins, data_file):
    return UserStore(coins, data_file)


@pytest.fixture(scope="session", autouse=True)
def setup_environment():
    """Set up environment variables for testing"""
    os.environ.setdefault("DISCORD_TOKEN", "test_discord_token")
    yield
