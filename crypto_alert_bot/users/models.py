"""
Data models for user profiles.
Defines holdings, price alerts and per-user settings, plus their JSON shape.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Any, List


@dataclass
class PriceAlert:
    """A one-shot alert that fires when the price crosses target_price"""
    symbol: str
    target_price: float
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def matches(self, symbol: str, target_price: float) -> bool:
        """Whether this alert has the same (symbol, target price) identity"""
        return self.symbol == symbol and self.target_price == target_price

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "symbol": self.symbol,
            "price": self.target_price,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PriceAlert":
        """Create from dictionary after deserialization"""
        created_at = data.get("createdAt")
        if isinstance(created_at, str):
            # Older snapshots use a trailing "Z"
            created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
        else:
            created_at = datetime.now(timezone.utc)
        return cls(
            symbol=data["symbol"],
            target_price=float(data["price"]),
            created_at=created_at,
        )


@dataclass
class UserSettings:
    """Per-user preferences"""
    daily_report: bool = False
    report_time: str = "09:00"

    def to_dict(self) -> Dict[str, Any]:
        return {"dailyReport": self.daily_report, "reportTime": self.report_time}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserSettings":
        return cls(
            daily_report=bool(data.get("dailyReport", False)),
            report_time=data.get("reportTime", "09:00"),
        )


@dataclass
class UserProfile:
    """Everything the bot knows about one user"""
    user_id: int
    username: str
    holdings: Dict[str, float] = field(default_factory=dict)
    alerts: List[PriceAlert] = field(default_factory=list)
    settings: UserSettings = field(default_factory=UserSettings)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "username": self.username,
            "portfolio": dict(self.holdings),
            "alerts": [alert.to_dict() for alert in self.alerts],
            "settings": self.settings.to_dict(),
        }

    @classmethod
    def from_dict(cls, user_id: int, data: Dict[str, Any]) -> "UserProfile":
        """Create from dictionary after deserialization"""
        return cls(
            user_id=user_id,
            username=data.get("username") or "",
            holdings={symbol: float(qty) for symbol, qty in data.get("portfolio", {}).items()},
            alerts=[PriceAlert.from_dict(a) for a in data.get("alerts", [])],
            settings=UserSettings.from_dict(data.get("settings", {})),
        )
