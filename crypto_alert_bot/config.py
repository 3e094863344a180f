# Configuration for the crypto price alert bot

from .prices.models import Coin

# Supported coins: symbol -> display name and provider identifiers
SUPPORTED_COINS = {
    "BTC": Coin(symbol="BTC", name="Bitcoin", coinbase_id="BTC-USD", gecko_id="bitcoin"),
    "ETH": Coin(symbol="ETH", name="Ethereum", coinbase_id="ETH-USD", gecko_id="ethereum"),
    "LTC": Coin(symbol="LTC", name="Litecoin", coinbase_id="LTC-USD", gecko_id="litecoin"),
    "ADA": Coin(symbol="ADA", name="Cardano", coinbase_id="ADA-USD", gecko_id="cardano"),
    "DOT": Coin(symbol="DOT", name="Polkadot", coinbase_id="DOT-USD", gecko_id="polkadot"),
    "LINK": Coin(symbol="LINK", name="Chainlink", coinbase_id="LINK-USD", gecko_id="chainlink"),
    "XRP": Coin(symbol="XRP", name="Ripple", coinbase_id="XRP-USD", gecko_id="ripple"),
}

# Symbol used by !price when none is given
DEFAULT_PRICE_SYMBOL = "BTC"

# Upstream quote providers
COINBASE_API_BASE = "https://api.exchange.coinbase.com"
COINGECKO_API_BASE = "https://api.coingecko.com/api/v3"

# Timeout in seconds for a single quote request
REQUEST_TIMEOUT = 10

# Alert sweep interval in seconds
ALERT_CHECK_INTERVAL = 120  # 2 minutes

# How often the digest job checks whether the report time has come
DIGEST_CHECK_INTERVAL = 60

# Daily market report time (local, HH:MM) and the coins it covers
DAILY_REPORT_TIME = "09:00"
DAILY_REPORT_WATCHLIST = ["BTC", "ETH", "LTC"]

# Snapshot of all user profiles
DATA_FILE = "user_data.json"
