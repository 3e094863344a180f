import pytest

from crypto_alert_bot.commands import CommandHandlers
from crypto_alert_bot.portfolio.valuator import PortfolioValuator
from crypto_alert_bot.reports.report_generator import ReportGenerator

USER = 555


@pytest.fixture
def handlers(coins, store, price_service):
    return CommandHandlers(
        coins,
        store,
        price_service,
        PortfolioValuator(store, price_service),
        ReportGenerator(price_service, ["BTC", "ETH", "LTC"]),
    )


async def run(handlers, command, *args):
    return await handlers.dispatch(command, list(args), USER, "alice")


async def test_start_creates_profile(handlers, store):
    text = await run(handlers, "start")

    assert "BTC, ETH, LTC, ADA, DOT, LINK, XRP" in text
    assert store.get_profile(USER).username == "alice"


async def test_help_lists_commands(handlers):
    text = await run(handlers, "help")

    for command in ("!price", "!set", "!remove", "!portfolio", "!alert", "!alerts", "!removealert", "!daily"):
        assert command in text


async def test_unknown_command(handlers):
    assert "Unknown command" in await run(handlers, "moon")


async def test_price_defaults_to_btc(handlers, coingecko):
    coingecko.quotes["bitcoin"] = {
        "usd": 50000,
        "usd_24h_change": 3.21,
        "usd_market_cap": 9.8e11,
        "usd_24h_vol": 2.5e10,
    }

    text = await run(handlers, "price")

    assert "Bitcoin (BTC)" in text
    assert "$50,000.00" in text
    assert "📈 +3.21%" in text
    assert "$980.00B" in text
    assert "$25.00B" in text


async def test_price_unsupported_symbol(handlers):
    text = await run(handlers, "price", "doge")

    assert "Unsupported coin: DOGE" in text


async def test_price_unavailable(handlers, coingecko):
    coingecko.rate_limited = True

    assert "Could not fetch the price" in await run(handlers, "price", "ETH")


async def test_set_holding(handlers, store):
    text = await run(handlers, "set", "btc", "0.5")

    assert "Bitcoin (BTC)" in text
    assert "0.5 BTC" in text
    assert store.get_holdings(USER) == {"BTC": 0.5}


@pytest.mark.parametrize("amount", ["-1", "abc", "inf"])
async def test_set_holding_invalid_amount(handlers, store, amount):
    text = await run(handlers, "set", "BTC", amount)

    assert "valid amount" in text
    assert store.get_holdings(USER) == {}


async def test_set_holding_missing_args(handlers):
    assert "Usage" in await run(handlers, "set", "BTC")


async def test_remove_holding(handlers, store):
    store.set_holding(USER, "ETH", 1)

    assert "Removed Ethereum (ETH)" in await run(handlers, "remove", "ETH")
    assert "no ETH holding" in await run(handlers, "remove", "ETH")


async def test_portfolio_empty(handlers):
    assert "not set any holdings" in await run(handlers, "portfolio")


async def test_portfolio_total(handlers, store, coingecko):
    coingecko.quotes["bitcoin"] = {"usd": 50000, "usd_24h_change": 1.0}
    store.set_holding(USER, "BTC", 0.5)

    text = await run(handlers, "portfolio")

    assert "Holding: 0.5 BTC" in text
    assert "Value: $25,000.00" in text
    assert "Total value: $25,000.00" in text


async def test_portfolio_mentions_skipped(handlers, store, coingecko):
    coingecko.quotes["bitcoin"] = {"usd": 50000}
    store.set_holding(USER, "BTC", 1)
    store.set_holding(USER, "ADA", 100)

    text = await run(handlers, "portfolio")

    assert "No price available for: ADA" in text
    assert "Total value: $50,000.00" in text


async def test_portfolio_all_unavailable(handlers, store):
    store.set_holding(USER, "BTC", 1)

    assert "Could not fetch portfolio prices" in await run(handlers, "portfolio")


async def test_alert_lifecycle(handlers, store):
    assert "price alert set at $50,000.00" in await run(handlers, "alert", "BTC", "50000")
    assert "price alert set at $3.500000" in await run(handlers, "alert", "XRP", "3.5")

    listing = await run(handlers, "alerts")
    assert "1. Bitcoin (BTC): $50,000.00" in listing
    assert "2. Ripple (XRP): $3.500000" in listing

    assert "Removed BTC alert" in await run(handlers, "removealert", "1")
    assert [a.symbol for a in store.list_alerts(USER)] == ["XRP"]


async def test_duplicate_alert(handlers, store):
    await run(handlers, "alert", "BTC", "50000")

    text = await run(handlers, "alert", "BTC", "50000")

    assert "already have a BTC alert" in text
    assert len(store.list_alerts(USER)) == 1


@pytest.mark.parametrize("price", ["0", "-10", "cheap"])
async def test_alert_invalid_price(handlers, store, price):
    assert "valid price" in await run(handlers, "alert", "BTC", price)
    assert store.list_alerts(USER) == []


async def test_alerts_empty(handlers):
    assert "no price alerts" in await run(handlers, "alerts")


@pytest.mark.parametrize("index", ["0", "2", "x"])
async def test_removealert_invalid_index(handlers, store, index):
    store.add_alert(USER, "BTC", 50000)

    assert "Invalid alert number" in await run(handlers, "removealert", index)
    assert len(store.list_alerts(USER)) == 1


async def test_daily_toggle_and_settings(handlers, store):
    assert "enabled" in await run(handlers, "daily")
    assert "Daily report: ✅ On" in await run(handlers, "settings")

    assert "disabled" in await run(handlers, "daily")
    settings = await run(handlers, "settings")
    assert "Daily report: ❌ Off" in settings
    assert "Report time: 09:00" in settings


async def test_market(handlers, coingecko):
    coingecko.quotes["bitcoin"] = {"usd": 50000, "usd_24h_change": 1.0, "usd_market_cap": 1e12}

    text = await run(handlers, "market")

    assert "Crypto market overview" in text
    assert "Bitcoin (BTC)" in text


async def test_market_unavailable(handlers):
    assert "Could not fetch market data" in await run(handlers, "market")


@pytest.mark.parametrize(
    "command, args",
    [
        ("price", [""]),
        ("set", ["", "1"]),
        ("remove", [""]),
        ("alert", ["", "5"]),
    ],
)
async def test_empty_symbol_gets_usage(handlers, store, command, args):
    text = await run(handlers, command, *args)

    assert "Usage" in text
    assert store.get_holdings(USER) == {}
    assert store.list_alerts(USER) == []
