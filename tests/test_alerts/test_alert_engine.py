import pytest

from crypto_alert_bot.alerts.alert_engine import AlertEngine, is_crossing
from crypto_alert_bot.users.user_storage import UserStore

USER = 1001
OTHER_USER = 1002


@pytest.fixture
def engine(coins, store, price_service, notifier):
    return AlertEngine(coins, store, price_service, notifier)


@pytest.mark.parametrize(
    "last, current, target, expected",
    [
        (49000, 51000, 50000, True),   # upward crossing
        (51000, 49000, 50000, True),   # downward crossing
        (49000, 50000, 50000, True),   # touch at current
        (50000, 51000, 50000, True),   # touch at last
        (50000, 50000, 50000, True),   # flat on the target
        (49000, 49500, 50000, False),  # below, not reached
        (51000, 52000, 50000, False),  # already above
        (50500, 50500, 50000, False),  # flat above
    ],
)
def test_is_crossing(last, current, target, expected):
    assert is_crossing(last, current, target) is expected


async def test_first_tick_only_sets_baseline(engine, store, coinbase, notifier):
    store.get_or_create(USER, "alice")
    store.add_alert(USER, "BTC", 50000)
    coinbase.set_price("BTC", 50000)

    fired = await engine.sweep()

    assert fired == []
    assert notifier.messages == []
    assert engine.last_prices["BTC"] == 50000
    assert len(store.list_alerts(USER)) == 1


async def test_crossing_fires_once_and_retires(engine, store, coinbase, notifier):
    store.get_or_create(USER, "alice")
    store.add_alert(USER, "BTC", 50000)

    coinbase.set_price("BTC", 49000)
    await engine.sweep()

    coinbase.set_price("BTC", 51000)
    fired = await engine.sweep()

    assert len(fired) == 1
    assert fired[0].user_id == USER
    assert fired[0].current_price == 51000
    assert fired[0].delivered is True
    assert store.list_alerts(USER) == []

    [text] = notifier.texts_for(USER)
    assert "Bitcoin (BTC)" in text
    assert "$50,000.00" in text
    assert "$51,000.00" in text

    coinbase.set_price("BTC", 52000)
    assert await engine.sweep() == []
    assert len(notifier.messages) == 1


async def test_oscillation_does_not_refire(engine, store, coinbase, notifier):
    store.add_alert(USER, "ETH", 3000)

    for price in (2900, 3100, 2900, 3100, 2900):
        coinbase.set_price("ETH", price)
        await engine.sweep()

    assert len(notifier.texts_for(USER)) == 1


async def test_unavailable_tick_is_skipped(engine, store, coinbase, notifier):
    store.add_alert(USER, "BTC", 50000)

    coinbase.set_price("BTC", 49000)
    await engine.sweep()

    coinbase.set_price("BTC", None)
    assert await engine.sweep() == []
    assert engine.last_prices["BTC"] == 49000
    assert len(store.list_alerts(USER)) == 1

    # Baseline survives the gap, so the crossing is still seen
    coinbase.set_price("BTC", 51000)
    fired = await engine.sweep()
    assert [f.alert.symbol for f in fired] == ["BTC"]


async def test_symbol_without_baseline_never_triggers(engine, store, coinbase, notifier):
    store.add_alert(USER, "ADA", 0.5)
    coinbase.set_price("BTC", 50000)

    for _ in range(5):
        await engine.sweep()

    assert "ADA" not in engine.last_prices
    assert notifier.messages == []
    assert len(store.list_alerts(USER)) == 1


async def test_alert_added_between_sweeps_is_picked_up(engine, store, coinbase, notifier):
    coinbase.set_price("LTC", 80)
    await engine.sweep()

    store.add_alert(USER, "LTC", 85)
    coinbase.set_price("LTC", 90)
    fired = await engine.sweep()

    assert len(fired) == 1
    assert fired[0].alert.target_price == 85


async def test_fires_for_every_user_and_keeps_other_alerts(engine, store, coinbase, notifier):
    store.add_alert(USER, "BTC", 50000)
    store.add_alert(USER, "BTC", 60000)
    store.add_alert(OTHER_USER, "BTC", 50000)

    coinbase.set_price("BTC", 49000)
    await engine.sweep()
    coinbase.set_price("BTC", 50500)
    fired = await engine.sweep()

    assert sorted(f.user_id for f in fired) == [USER, OTHER_USER]
    assert [a.target_price for a in store.list_alerts(USER)] == [60000]
    assert store.list_alerts(OTHER_USER) == []


async def test_failed_delivery_still_retires(engine, store, coinbase, notifier):
    store.add_alert(USER, "BTC", 50000)
    notifier.fail_for.add(USER)

    coinbase.set_price("BTC", 51000)
    await engine.sweep()
    coinbase.set_price("BTC", 49000)
    fired = await engine.sweep()

    assert len(fired) == 1
    assert fired[0].delivered is False
    assert store.list_alerts(USER) == []


async def test_sweep_persists_retired_alerts(engine, store, coinbase, coins, data_file):
    store.add_alert(USER, "BTC", 50000)
    store.add_alert(USER, "ETH", 3000)

    coinbase.set_price("BTC", 49000)
    await engine.sweep()
    coinbase.set_price("BTC", 51000)
    await engine.sweep()

    reloaded = UserStore(coins, data_file)
    assert reloaded.load() is True
    assert [a.symbol for a in reloaded.list_alerts(USER)] == ["ETH"]


async def test_raising_notifier_does_not_abort_sweep(coins, store, price_service, coinbase, data_file):
    class BrokenNotifier:
        async def send(self, user_id, text):
            raise OSError("connection reset")

    engine = AlertEngine(coins, store, price_service, BrokenNotifier())
    store.add_alert(USER, "BTC", 50000)
    store.add_alert(OTHER_USER, "BTC", 50500)

    coinbase.set_price("BTC", 49000)
    coinbase.set_price("ETH", 3000)
    await engine.sweep()
    coinbase.set_price("BTC", 51000)
    coinbase.set_price("ETH", 3100)
    fired = await engine.sweep()

    assert len(fired) == 2
    assert all(event.delivered is False for event in fired)
    assert engine.last_prices == {"BTC": 51000, "ETH": 3100}

    reloaded = UserStore(coins, data_file)
    assert reloaded.load() is True
    assert reloaded.list_alerts(USER) == []
    assert reloaded.list_alerts(OTHER_USER) == []
