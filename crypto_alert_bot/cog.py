"""
Discord cog for the crypto price alert bot.
Maps chat commands to the handlers and runs the scheduled jobs.
"""

from discord.ext import commands, tasks
from loguru import logger

from .alerts.alert_engine import AlertEngine
from .commands import CommandHandlers
from .config import (
    ALERT_CHECK_INTERVAL,
    DAILY_REPORT_TIME,
    DAILY_REPORT_WATCHLIST,
    DATA_FILE,
    DEFAULT_PRICE_SYMBOL,
    DIGEST_CHECK_INTERVAL,
    SUPPORTED_COINS,
)
from .jobs import JobScheduler
from .notifier import DiscordNotifier
from .portfolio.valuator import PortfolioValuator
from .prices.price_service import PriceService
from .reports.models import ReportTime
from .reports.report_generator import ReportGenerator
from .reports.scheduler import ReportScheduler
from .users.user_storage import UserStore


class CryptoAlerts(commands.Cog):
    """Discord cog for crypto prices, portfolios and price alerts"""

    def __init__(self, bot):
        """Initialize the cog and its components"""
        self.bot = bot
        logger.info("Initializing CryptoAlerts cog")

        self.store = UserStore(SUPPORTED_COINS, DATA_FILE)
        self.store.load()

        self.price_service = PriceService(SUPPORTED_COINS)
        self.notifier = DiscordNotifier(bot)
        self.valuator = PortfolioValuator(self.store, self.price_service)
        self.generator = ReportGenerator(self.price_service, DAILY_REPORT_WATCHLIST)
        self.engine = AlertEngine(SUPPORTED_COINS, self.store, self.price_service, self.notifier)
        self.jobs = JobScheduler(
            engine=self.engine,
            store=self.store,
            generator=self.generator,
            report_scheduler=ReportScheduler(ReportTime.parse(DAILY_REPORT_TIME)),
            notifier=self.notifier,
        )
        self.handlers = CommandHandlers(
            SUPPORTED_COINS,
            self.store,
            self.price_service,
            self.valuator,
            self.generator,
            default_symbol=DEFAULT_PRICE_SYMBOL,
            prefix=bot.command_prefix,
        )

        self.check_price_alerts.start()
        self.daily_report_task.start()
        logger.info("Started price alert and daily report tasks")

    def cog_unload(self):
        """Clean up when the cog is unloaded"""
        logger.info("Unloading CryptoAlerts cog")
        self.check_price_alerts.cancel()
        self.daily_report_task.cancel()
        self.store.save()

    async def _reply(self, ctx, command: str, *args: str) -> None:
        async with ctx.typing():
            text = await self.handlers.dispatch(command, args, ctx.author.id, ctx.author.name)
        await ctx.send(text)

    @commands.command(name="start")
    async def start(self, ctx):
        """Welcome message and main commands"""
        await self._reply(ctx, "start")

    @commands.command(name="help")
    async def help(self, ctx):
        """List all commands"""
        await self._reply(ctx, "help")

    @commands.command(name="price")
    async def price(self, ctx, symbol: str = None):
        """Show the current price of a coin

        Example:
        !price BTC
        """
        await self._reply(ctx, "price", *([symbol] if symbol else []))

    @commands.command(name="set")
    async def set_holding(self, ctx, symbol: str = None, amount: str = None):
        """Set how much of a coin you hold

        Example:
        !set BTC 0.5
        """
        await self._reply(ctx, "set", *[a for a in (symbol, amount) if a is not None])

    @commands.command(name="remove")
    async def remove_holding(self, ctx, symbol: str = None):
        """Remove a coin from your portfolio"""
        await self._reply(ctx, "remove", *([symbol] if symbol else []))

    @commands.command(name="portfolio")
    async def portfolio(self, ctx):
        """Show the value of your holdings"""
        await self._reply(ctx, "portfolio")

    @commands.command(name="alert")
    async def add_alert(self, ctx, symbol: str = None, price: str = None):
        """Alert when a coin crosses a price

        Example:
        !alert BTC 50000
        """
        await self._reply(ctx, "alert", *[a for a in (symbol, price) if a is not None])

    @commands.command(name="alerts")
    async def list_alerts(self, ctx):
        """List your price alerts"""
        await self._reply(ctx, "alerts")

    @commands.command(name="removealert")
    async def remove_alert(self, ctx, index: str = None):
        """Delete a price alert by number

        Example:
        !removealert 2
        """
        await self._reply(ctx, "removealert", *([index] if index else []))

    @commands.command(name="market")
    async def market(self, ctx):
        """Show a market overview"""
        await self._reply(ctx, "market")

    @commands.command(name="daily")
    async def daily(self, ctx):
        """Turn the daily market report on or off"""
        await self._reply(ctx, "daily")

    @commands.command(name="settings")
    async def settings(self, ctx):
        """Show your settings"""
        await self._reply(ctx, "settings")

    @tasks.loop(seconds=ALERT_CHECK_INTERVAL)
    async def check_price_alerts(self):
        """Sweep all alerts against current prices"""
        logger.debug("Running periodic price alert check")
        await self.jobs.run_alert_sweep()

    @tasks.loop(seconds=DIGEST_CHECK_INTERVAL)
    async def daily_report_task(self):
        """Send the daily report once its time has come"""
        await self.jobs.run_daily_digest()

    @check_price_alerts.before_loop
    @daily_report_task.before_loop
    async def before_tasks(self):
        """Wait until the bot is ready before starting the loops"""
        logger.debug("Waiting for bot to be ready before starting tasks")
        await self.bot.wait_until_ready()
        logger.debug("Bot is ready, tasks starting")


async def setup(bot):
    """Add the CryptoAlerts cog to the bot"""
    logger.info("Setting up CryptoAlerts cog")
    await bot.add_cog(CryptoAlerts(bot))
    logger.info("CryptoAlerts cog setup complete")
