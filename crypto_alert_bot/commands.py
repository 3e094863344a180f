"""
Command handlers for the bot.
Each handler takes the parsed arguments of one chat command and returns the reply text.
"""

from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Mapping, Sequence
from loguru import logger

from .portfolio.models import EmptyPortfolio
from .portfolio.valuator import PortfolioValuator
from .prices.models import Coin, Unavailable
from .prices.price_service import PriceService
from .reports.report_generator import ReportGenerator
from .users.exceptions import (
    DuplicateAlert,
    IndexOutOfRange,
    InvalidInput,
    InvalidPrice,
    InvalidQuantity,
    UnsupportedSymbol,
)
from .users.user_storage import UserStore
from .utils.format_utilities import (
    format_market_cap,
    format_percentage,
    format_price,
    format_quantity,
)
from .utils.validation_utilities import parse_index, parse_price, parse_quantity, validate_symbol


Handler = Callable[[Sequence[str], int, str], Awaitable[str]]


class CommandHandlers:
    """Handlers for user commands, independent of the chat transport"""

    def __init__(
        self,
        coins: Mapping[str, Coin],
        store: UserStore,
        price_service: PriceService,
        valuator: PortfolioValuator,
        generator: ReportGenerator,
        default_symbol: str = "BTC",
        prefix: str = "!",
    ):
        """
        Initialize with required services.

        Args:
            coins: Supported coin table keyed by symbol
            store: User store
            price_service: Source of quotes for !price
            valuator: Portfolio valuator for !portfolio
            generator: Report generator for !market
            default_symbol: Symbol used by !price without argument
            prefix: Command prefix shown in help texts
        """
        self.coins = coins
        self.store = store
        self.price_service = price_service
        self.valuator = valuator
        self.generator = generator
        self.default_symbol = default_symbol
        self.prefix = prefix
        self.handlers: Dict[str, Handler] = {
            "start": self.start,
            "help": self.help,
            "price": self.price,
            "set": self.set_holding,
            "remove": self.remove_holding,
            "portfolio": self.portfolio,
            "alert": self.add_alert,
            "alerts": self.list_alerts,
            "removealert": self.remove_alert,
            "market": self.market,
            "daily": self.toggle_daily,
            "settings": self.settings,
        }
        logger.debug("Initialized CommandHandlers")

    async def dispatch(self, command: str, args: Sequence[str], user_id: int, display_name: str) -> str:
        """
        Run the handler for a command.

        Args:
            command: Command name without prefix
            args: Positional arguments
            user_id: Id of the requesting user
            display_name: Name of the requesting user

        Returns:
            Reply text
        """
        handler = self.handlers.get(command.lower())
        if handler is None:
            return f"❌ Unknown command: {command}\nUse {self.prefix}help to see all commands"

        logger.debug(f"User {user_id} ({display_name}) ran {command} {list(args)}")
        return await handler(args, user_id, display_name)

    @property
    def supported_list(self) -> str:
        return ", ".join(self.coins.keys())

    def _unsupported(self, symbol: str) -> str:
        return f"❌ Unsupported coin: {symbol.upper()}\nSupported coins: {self.supported_list}"

    # General

    async def start(self, args: Sequence[str], user_id: int, display_name: str) -> str:
        self.store.get_or_create(user_id, display_name)
        p = self.prefix
        return (
            "🎉 Welcome to the crypto price alert bot!\n\n"
            f"🪙 Supported coins: {self.supported_list}\n\n"
            "📊 Main features:\n"
            f"{p}price [coin] - Show price (e.g. {p}price BTC)\n"
            f"{p}portfolio - Show your portfolio\n"
            f"{p}set [coin] [amount] - Set a holding\n"
            f"{p}alert [coin] [price] - Set a price alert\n"
            f"{p}market - Market overview\n"
            f"{p}daily - Toggle the daily report\n"
            f"{p}help - Show all commands"
        )

    async def help(self, args: Sequence[str], user_id: int, display_name: str) -> str:
        p = self.prefix
        return (
            "📋 All commands:\n\n"
            "💰 Prices:\n"
            f"{p}price [coin] - Current price and 24h change (e.g. {p}price BTC)\n\n"
            "📊 Portfolio:\n"
            f"{p}portfolio - Show your portfolio\n"
            f"{p}set [coin] [amount] - Set a holding (e.g. {p}set BTC 0.5)\n"
            f"{p}remove [coin] - Remove a holding\n\n"
            "🔔 Price alerts:\n"
            f"{p}alert [coin] [price] - Alert when the price crosses a level (e.g. {p}alert BTC 50000)\n"
            f"{p}alerts - List your alerts\n"
            f"{p}removealert [number] - Delete an alert\n\n"
            "📈 Market:\n"
            f"{p}market - Market overview\n\n"
            "⚙️ Settings:\n"
            f"{p}daily - Turn the daily report on or off\n"
            f"{p}settings - Show your settings\n\n"
            f"Supported coins: {self.supported_list}"
        )

    # Prices

    async def price(self, args: Sequence[str], user_id: int, display_name: str) -> str:
        """Current price, 24h change, market cap and volume for one coin"""
        raw = args[0] if args else self.default_symbol
        try:
            symbol = validate_symbol(raw, self.coins)
        except UnsupportedSymbol:
            return self._unsupported(raw)
        except InvalidInput:
            return f"❌ Usage: {self.prefix}price [coin]\nExample: {self.prefix}price BTC"

        quote = await self.price_service.fetch_detailed_quote(symbol)
        if isinstance(quote, Unavailable):
            return "❌ Could not fetch the price, please try again later"

        return (
            f"📊 {quote.name} ({quote.symbol}) price:\n\n"
            f"💰 Current price: {format_price(quote.price)}\n"
            f"📈 24h change: {format_percentage(quote.change_24h)}\n"
            f"📊 Market cap: {format_market_cap(quote.market_cap)}\n"
            f"💱 24h volume: {format_market_cap(quote.volume_24h)}\n\n"
            f"🕐 Updated: {datetime.now().strftime('%H:%M:%S')}"
        )

    async def market(self, args: Sequence[str], user_id: int, display_name: str) -> str:
        report = await self.generator.generate_market_overview()
        if report is None:
            return "❌ Could not fetch market data, please try again later"
        return report

    # Portfolio

    async def set_holding(self, args: Sequence[str], user_id: int, display_name: str) -> str:
        p = self.prefix
        if len(args) < 2:
            return f"❌ Usage: {p}set [coin] [amount]\nExample: {p}set BTC 0.5"
        try:
            symbol = validate_symbol(args[0], self.coins)
            quantity = parse_quantity(args[1])
            self.store.get_or_create(user_id, display_name)
            self.store.set_holding(user_id, symbol, quantity)
        except UnsupportedSymbol:
            return self._unsupported(args[0])
        except InvalidQuantity:
            return f"❌ Please enter a valid amount\nExample: {p}set BTC 0.5"
        except InvalidInput:
            return f"❌ Usage: {p}set [coin] [amount]\nExample: {p}set BTC 0.5"

        coin = self.coins[symbol]
        return f"✅ {coin.label} holding set to {format_quantity(quantity)} {symbol}"

    async def remove_holding(self, args: Sequence[str], user_id: int, display_name: str) -> str:
        if not args:
            return f"❌ Usage: {self.prefix}remove [coin]"
        try:
            symbol = validate_symbol(args[0], self.coins)
        except UnsupportedSymbol:
            return self._unsupported(args[0])
        except InvalidInput:
            return f"❌ Usage: {self.prefix}remove [coin]"

        self.store.get_or_create(user_id, display_name)
        if not self.store.remove_holding(user_id, symbol):
            return f"❌ You have no {symbol} holding"
        return f"✅ Removed {self.coins[symbol].label} from your portfolio"

    async def portfolio(self, args: Sequence[str], user_id: int, display_name: str) -> str:
        p = self.prefix
        valuation = await self.valuator.valuate(user_id)
        if isinstance(valuation, EmptyPortfolio):
            return f"❌ You have not set any holdings yet\nUse {p}set [coin] [amount]\nExample: {p}set BTC 0.5"

        if not valuation.positions:
            return "❌ Could not fetch portfolio prices, please try again later"

        text = "💰 Your portfolio:\n\n"
        for position in valuation.positions:
            text += f"{position.name} ({position.symbol}):\n"
            text += f"  💎 Holding: {format_quantity(position.quantity)} {position.symbol}\n"
            text += f"  💰 Price: {format_price(position.price)}\n"
            text += f"  📈 24h change: {format_percentage(position.change_24h)}\n"
            text += f"  💵 Value: {format_price(position.value)}\n\n"

        if valuation.skipped:
            text += f"⚠️ No price available for: {', '.join(valuation.skipped)}\n\n"

        text += f"🏆 Total value: {format_price(valuation.total_value)}"
        return text

    # Alerts

    async def add_alert(self, args: Sequence[str], user_id: int, display_name: str) -> str:
        p = self.prefix
        if len(args) < 2:
            return f"❌ Usage: {p}alert [coin] [price]\nExample: {p}alert BTC 50000"
        try:
            symbol = validate_symbol(args[0], self.coins)
            target_price = parse_price(args[1])
            self.store.get_or_create(user_id, display_name)
            self.store.add_alert(user_id, symbol, target_price)
        except UnsupportedSymbol:
            return self._unsupported(args[0])
        except InvalidPrice:
            return f"❌ Please enter a valid price\nExample: {p}alert BTC 50000"
        except DuplicateAlert:
            return f"❌ You already have a {symbol} alert at {format_price(target_price)}"
        except InvalidInput:
            return f"❌ Usage: {p}alert [coin] [price]\nExample: {p}alert BTC 50000"

        return f"🔔 {self.coins[symbol].label} price alert set at {format_price(target_price)}"

    async def list_alerts(self, args: Sequence[str], user_id: int, display_name: str) -> str:
        alerts = self.store.list_alerts(user_id)
        if not alerts:
            return f"❌ You have no price alerts\nUse {self.prefix}alert [coin] [price] to add one"

        lines: List[str] = []
        for index, alert in enumerate(alerts, start=1):
            coin = self.coins.get(alert.symbol)
            label = coin.label if coin else alert.symbol
            lines.append(f"{index}. {label}: {format_price(alert.target_price)}")

        return (
            "🔔 Your price alerts:\n\n" + "\n".join(lines) +
            f"\n\nUse {self.prefix}removealert [number] to delete one"
        )

    async def remove_alert(self, args: Sequence[str], user_id: int, display_name: str) -> str:
        p = self.prefix
        if not args:
            return f"❌ Usage: {p}removealert [number]\nUse {p}alerts to see the numbers"
        try:
            alert = self.store.remove_alert(user_id, parse_index(args[0]))
        except IndexOutOfRange:
            return f"❌ Invalid alert number\nUse {p}alerts to see the numbers"

        return f"✅ Removed {alert.symbol} alert at {format_price(alert.target_price)}"

    # Settings

    async def toggle_daily(self, args: Sequence[str], user_id: int, display_name: str) -> str:
        self.store.get_or_create(user_id, display_name)
        enabled = self.store.toggle_daily_report(user_id)
        if enabled:
            profile = self.store.get_profile(user_id)
            return f"✅ Daily report enabled! A market summary will be sent every day at {profile.settings.report_time}"
        return "❌ Daily report disabled"

    async def settings(self, args: Sequence[str], user_id: int, display_name: str) -> str:
        profile = self.store.get_or_create(user_id, display_name)
        status = "✅ On" if profile.settings.daily_report else "❌ Off"
        return (
            "⚙️ Your settings:\n\n"
            f"Daily report: {status}\n"
            f"Report time: {profile.settings.report_time}\n"
            f"Holdings: {len(profile.holdings)}\n"
            f"Price alerts: {len(profile.alerts)}"
        )
