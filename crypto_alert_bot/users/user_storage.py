"""
Storage for user profiles.
Owns the in-memory profile map and persists it to a JSON snapshot.
"""

import copy
import json
import math
import os
import tempfile
import threading
from typing import Dict, List, Mapping, Optional, Tuple
from loguru import logger

from ..prices.models import Coin
from .exceptions import (
    DuplicateAlert,
    IndexOutOfRange,
    InvalidPrice,
    InvalidQuantity,
    PersistenceError,
    UnsupportedSymbol,
)
from .models import PriceAlert, UserProfile


def _is_number(value) -> bool:
    """Finite int or float; bool is rejected even though it is an int"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)

class UserStore:
    """
    Storage management for user profiles.

    The store is the only component that mutates holdings and alerts. Every
    mutation runs under a lock and is followed by a full snapshot write; a
    failed write is logged and the in-memory change is kept.
    """

    def __init__(self, coins: Mapping[str, Coin], file_path: str = "user_data.json"):
        """
        Initialize the user store.

        Args:
            coins: Supported coin table keyed by symbol
            file_path: Path to the JSON snapshot
        """
        self.coins = coins
        self.file_path = file_path
        self.users: Dict[int, UserProfile] = {}
        self._lock = threading.RLock()
        logger.debug(f"Initialized UserStore with file: {file_path}")

    def load(self) -> bool:
        """
        Load profiles from the snapshot file.

        Returns:
            Whether loading was successful
        """
        if not os.path.exists(self.file_path):
            logger.info(f"No user data file found at {self.file_path}")
            return False

        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)

            users = {}
            for user_id_str, profile_data in data.items():
                user_id = int(user_id_str)
                users[user_id] = UserProfile.from_dict(user_id, profile_data)

            with self._lock:
                self.users = users

            alert_count = sum(len(p.alerts) for p in users.values())
            logger.info(f"Loaded {len(users)} users with {alert_count} alerts from {self.file_path}")
            return True

        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Error loading user data, starting empty: {str(e)}")
            return False

    def save(self) -> bool:
        """
        Save all profiles to the snapshot file.

        Returns:
            Whether saving was successful
        """
        try:
            with self._lock:
                data = self.to_dict()
                self._write_snapshot(data)
            logger.debug(f"Saved {len(data)} user profiles to {self.file_path}")
            return True
        except PersistenceError as e:
            logger.error(f"Error saving user data: {str(e)}")
            return False

    def to_dict(self) -> Dict[str, dict]:
        """Serializable snapshot keyed by stringified user id"""
        with self._lock:
            return {str(user_id): profile.to_dict() for user_id, profile in self.users.items()}

    def _write_snapshot(self, data: Dict[str, dict]) -> None:
        """Write the snapshot to a temp file and rename it over the old one"""
        directory = os.path.dirname(os.path.abspath(self.file_path))
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".user_data.", suffix=".tmp")
        except OSError as e:
            raise PersistenceError(f"Cannot create temp file in {directory}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.file_path)
        except (OSError, TypeError, ValueError) as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise PersistenceError(f"Cannot write {self.file_path}: {e}") from e

    # Profiles

    def get_or_create(self, user_id: int, display_name: str) -> UserProfile:
        """
        Get a user's profile, creating it on first interaction.
        An existing profile is left unchanged. Returns a copy.
        """
        with self._lock:
            profile = self.users.get(user_id)
            if profile is not None:
                return copy.deepcopy(profile)

            profile = UserProfile(user_id=user_id, username=display_name)
            self.users[user_id] = profile
            logger.info(f"Created profile for user {user_id} ({display_name})")
            self.save()
            return copy.deepcopy(profile)

    def get_profile(self, user_id: int) -> Optional[UserProfile]:
        """Get a copy of a user's profile if it exists"""
        with self._lock:
            profile = self.users.get(user_id)
            return copy.deepcopy(profile) if profile is not None else None

    # Holdings

    def set_holding(self, user_id: int, symbol: str, quantity: float) -> float:
        """
        Set the held quantity of a coin.

        Raises:
            UnsupportedSymbol: If the symbol is not supported
            InvalidQuantity: If quantity is negative or not finite
        """
        symbol = self._check_symbol(symbol)
        if not _is_number(quantity) or quantity < 0:
            raise InvalidQuantity(f"Quantity must be a non-negative number, got {quantity!r}")

        with self._lock:
            profile = self._require(user_id)
            profile.holdings[symbol] = float(quantity)
            logger.info(f"User {user_id} set {symbol} holding to {quantity}")
            self.save()
        return float(quantity)

    def remove_holding(self, user_id: int, symbol: str) -> bool:
        """
        Remove a coin from a user's holdings.

        Returns:
            Whether the coin was held
        """
        symbol = self._check_symbol(symbol)
        with self._lock:
            profile = self._require(user_id)
            if symbol not in profile.holdings:
                return False
            del profile.holdings[symbol]
            logger.info(f"User {user_id} removed {symbol} holding")
            self.save()
            return True

    def get_holdings(self, user_id: int) -> Dict[str, float]:
        """Copy of a user's holdings, empty if the user is unknown"""
        with self._lock:
            profile = self.users.get(user_id)
            return dict(profile.holdings) if profile else {}

    # Alerts

    def add_alert(self, user_id: int, symbol: str, target_price: float) -> PriceAlert:
        """
        Add a price alert for a user.

        Raises:
            UnsupportedSymbol: If the symbol is not supported
            InvalidPrice: If the target price is not positive and finite
            DuplicateAlert: If the same symbol and price are already set
        """
        symbol = self._check_symbol(symbol)
        if not _is_number(target_price) or target_price <= 0:
            raise InvalidPrice(f"Target price must be a positive number, got {target_price!r}")
        target_price = float(target_price)

        with self._lock:
            profile = self._require(user_id)
            if any(a.matches(symbol, target_price) for a in profile.alerts):
                raise DuplicateAlert(f"Alert for {symbol} at {target_price} already exists")

            alert = PriceAlert(symbol=symbol, target_price=target_price)
            profile.alerts.append(alert)
            logger.info(f"User {user_id} added alert {symbol} @ {target_price}")
            self.save()
            return alert

    def remove_alert(self, user_id: int, index: int) -> PriceAlert:
        """
        Remove an alert by its 1-based position.

        Raises:
            IndexOutOfRange: If index is not a valid position
        """
        with self._lock:
            profile = self.users.get(user_id)
            count = len(profile.alerts) if profile else 0
            if not isinstance(index, int) or not 1 <= index <= count:
                raise IndexOutOfRange(f"Alert index must be between 1 and {count}, got {index!r}")

            alert = profile.alerts.pop(index - 1)
            logger.info(f"User {user_id} removed alert #{index} {alert.symbol} @ {alert.target_price}")
            self.save()
            return alert

    def list_alerts(self, user_id: int) -> List[PriceAlert]:
        """Copy of a user's alerts in insertion order"""
        with self._lock:
            profile = self.users.get(user_id)
            return list(profile.alerts) if profile else []

    def alerts_for_symbol(self, symbol: str) -> List[Tuple[int, PriceAlert]]:
        """All (user_id, alert) pairs on a symbol, read fresh across users"""
        with self._lock:
            return [
                (user_id, alert)
                for user_id, profile in self.users.items()
                for alert in profile.alerts
                if alert.symbol == symbol
            ]

    def retire_alert(self, user_id: int, alert: PriceAlert) -> bool:
        """
        Remove a fired alert without persisting.
        The caller saves once after a batch of retirements.

        Returns:
            Whether the alert was still present
        """
        with self._lock:
            profile = self.users.get(user_id)
            if profile is None:
                return False
            for i, existing in enumerate(profile.alerts):
                if existing.matches(alert.symbol, alert.target_price):
                    del profile.alerts[i]
                    return True
            return False

    # Settings

    def toggle_daily_report(self, user_id: int) -> bool:
        """
        Flip the daily report setting.

        Returns:
            The new setting
        """
        with self._lock:
            profile = self._require(user_id)
            profile.settings.daily_report = not profile.settings.daily_report
            logger.info(f"User {user_id} daily report set to {profile.settings.daily_report}")
            self.save()
            return profile.settings.daily_report

    def daily_report_users(self) -> List[int]:
        """Ids of users who enabled the daily report"""
        with self._lock:
            return [uid for uid, p in self.users.items() if p.settings.daily_report]

    def _require(self, user_id: int) -> UserProfile:
        # Mutations on an unseen user create an anonymous profile
        profile = self.users.get(user_id)
        if profile is None:
            profile = UserProfile(user_id=user_id, username="")
            self.users[user_id] = profile
        return profile

    def _check_symbol(self, symbol: str) -> str:
        symbol = symbol.upper()
        if symbol not in self.coins:
            raise UnsupportedSymbol(f"Unsupported symbol: {symbol}")
        return symbol
