"""
Utilities for formatting prices and market data in chat messages.
"""

from typing import Optional


def format_price(price: float) -> str:
    """
    Format a USD price.

    Prices of 1000 and above get thousands separators and two decimals,
    smaller prices six decimals.
    """
    if price >= 1000:
        return f"${price:,.2f}"
    return f"${price:.6f}"


def format_percentage(percentage: Optional[float]) -> str:
    """Format a 24h change with trend emoji and sign, or N/A"""
    if percentage is None:
        return "N/A"
    sign = "+" if percentage >= 0 else ""
    emoji = "📈" if percentage >= 0 else "📉"
    return f"{emoji} {sign}{percentage:.2f}%"


def format_market_cap(market_cap: Optional[float]) -> str:
    """Format a large USD amount with T/B/M suffix, or N/A"""
    if not market_cap:
        return "N/A"
    if market_cap >= 1e12:
        return f"${market_cap / 1e12:.2f}T"
    if market_cap >= 1e9:
        return f"${market_cap / 1e9:.2f}B"
    if market_cap >= 1e6:
        return f"${market_cap / 1e6:.2f}M"
    return format_price(market_cap)


def format_quantity(quantity: float) -> str:
    """Format a coin quantity without trailing zeros"""
    return f"{quantity:.8f}".rstrip("0").rstrip(".") or "0"
