"""
Price crossing detection for user alerts.
Compares each poll against the previous one and fires alerts whose target lies in between.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping
from loguru import logger

from ..notifier import Notifier
from ..prices.models import Coin, Unavailable
from ..prices.price_service import PriceService
from ..users.models import PriceAlert
from ..users.user_storage import UserStore
from ..utils.format_utilities import format_price


def is_crossing(last_price: float, current_price: float, target_price: float) -> bool:
    """
    Whether target_price lies in the closed interval between two consecutive prices.
    Touching the target at either end counts, in either direction.
    """
    return (
        (last_price <= target_price and current_price >= target_price) or
        (last_price >= target_price and current_price <= target_price)
    )


@dataclass
class FiredAlert:
    """An alert that fired during a sweep"""
    user_id: int
    alert: PriceAlert
    current_price: float
    delivered: bool = False


class AlertEngine:
    """
    Edge-triggered price alerts.

    Only the last observed price per symbol is kept. A symbol without a
    previous observation cannot trigger anything; its first successful tick
    only sets the baseline.
    """

    def __init__(
        self,
        coins: Mapping[str, Coin],
        store: UserStore,
        price_service: PriceService,
        notifier: Notifier,
    ):
        """
        Initialize the alert engine.

        Args:
            coins: Supported coin table keyed by symbol
            store: User store owning the alert lists
            price_service: Source of price ticks
            notifier: Delivery of alert messages
        """
        self.coins = coins
        self.store = store
        self.price_service = price_service
        self.notifier = notifier
        self.last_prices: Dict[str, float] = {}
        logger.info(f"Initialized AlertEngine for {len(coins)} coins")

    async def sweep(self) -> List[FiredAlert]:
        """
        Run one polling cycle over all supported coins.

        Returns:
            Alerts fired in this cycle
        """
        ticks = await self.price_service.fetch_prices(self.coins.keys())

        current_prices: Dict[str, float] = {}
        for symbol, tick in ticks.items():
            if isinstance(tick, Unavailable):
                logger.warning(f"No price for {symbol} this cycle ({tick.reason}), skipping")
                continue
            current_prices[symbol] = tick.price

        fired: List[FiredAlert] = []
        for symbol, current_price in current_prices.items():
            last_price = self.last_prices.get(symbol)
            if last_price is not None:
                fired.extend(await self._fire_crossed(symbol, last_price, current_price))

        # Baseline for the next cycle, whether or not anything fired
        self.last_prices.update(current_prices)

        self.store.save()

        if fired:
            logger.info(f"Sweep fired {len(fired)} alerts")
        else:
            logger.debug(f"Sweep complete, {len(current_prices)}/{len(self.coins)} prices, no alerts")
        return fired

    async def _fire_crossed(self, symbol: str, last_price: float, current_price: float) -> List[FiredAlert]:
        """Retire and notify every alert on symbol crossed between the two prices"""
        crossed = [
            (user_id, alert)
            for user_id, alert in self.store.alerts_for_symbol(symbol)
            if is_crossing(last_price, current_price, alert.target_price)
        ]

        fired = []
        for user_id, alert in crossed:
            # Retire before notifying so the alert cannot fire twice
            if not self.store.retire_alert(user_id, alert):
                logger.debug(f"Alert {symbol} @ {alert.target_price} of user {user_id} already removed")
                continue

            logger.info(
                f"Alert fired for user {user_id}: {symbol} target {alert.target_price}, "
                f"price moved {last_price} -> {current_price}"
            )
            event = FiredAlert(user_id=user_id, alert=alert, current_price=current_price)
            try:
                event.delivered = await self.notifier.send(user_id, self.format_notification(event))
            except Exception as e:
                logger.error(f"Error notifying user {user_id} of {symbol} alert: {str(e)}")
            fired.append(event)

        return fired

    def format_notification(self, event: FiredAlert) -> str:
        """Build the message sent when an alert fires"""
        coin = self.coins[event.alert.symbol]
        return (
            f"🚨 {coin.label} price alert!\n"
            f"Target price: {format_price(event.alert.target_price)}\n"
            f"Current price: {format_price(event.current_price)}"
        )
