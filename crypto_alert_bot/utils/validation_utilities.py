"""
Utilities for validating command parameters.
Turns raw command text into typed values or raises an InvalidInput error.
"""

import math
from typing import Mapping, Optional

from ..prices.models import Coin
from ..users.exceptions import (
    IndexOutOfRange,
    InvalidInput,
    InvalidPrice,
    InvalidQuantity,
    UnsupportedSymbol,
)


def _parse_number(value: Optional[str]) -> float:
    if value is None:
        raise ValueError("missing value")
    num = float(value.replace(",", ""))
    if not math.isfinite(num):
        raise ValueError(f"{value} is not finite")
    return num


def parse_quantity(value: Optional[str]) -> float:
    """
    Parse a holding quantity.

    Raises:
        InvalidQuantity: If the value is not a non-negative number
    """
    try:
        quantity = _parse_number(value)
    except ValueError:
        raise InvalidQuantity(f"Invalid quantity: {value!r}")
    if quantity < 0:
        raise InvalidQuantity(f"Quantity cannot be negative: {value!r}")
    return quantity


def parse_price(value: Optional[str]) -> float:
    """
    Parse an alert target price.

    Raises:
        InvalidPrice: If the value is not a positive number
    """
    try:
        price = _parse_number(value)
    except ValueError:
        raise InvalidPrice(f"Invalid price: {value!r}")
    if price <= 0:
        raise InvalidPrice(f"Price must be greater than 0: {value!r}")
    return price


def parse_index(value: Optional[str]) -> int:
    """
    Parse a 1-based list position.

    Raises:
        IndexOutOfRange: If the value is not a whole number
    """
    try:
        return int(value)
    except (TypeError, ValueError):
        raise IndexOutOfRange(f"Invalid index: {value!r}")


def validate_symbol(value: Optional[str], coins: Mapping[str, Coin]) -> str:
    """
    Normalize and check a coin symbol.

    Raises:
        InvalidInput: If no symbol was given
        UnsupportedSymbol: If the symbol is not supported
    """
    if not value:
        raise InvalidInput("Missing coin symbol")
    symbol = value.upper()
    if symbol not in coins:
        raise UnsupportedSymbol(f"Unsupported symbol: {symbol}")
    return symbol
