"""
Exceptions raised by the user store.
"""


class InvalidInput(Exception):
    """User supplied a value that cannot be applied. State is unchanged."""
    pass


class InvalidQuantity(InvalidInput):
    """Holding quantity is negative or not a finite number"""
    pass


class InvalidPrice(InvalidInput):
    """Alert target price is not a positive finite number"""
    pass


class IndexOutOfRange(InvalidInput):
    """Alert index is not a valid 1-based position"""
    pass


class UnsupportedSymbol(InvalidInput):
    """Symbol is not in the supported coin table"""
    pass


class DuplicateAlert(Exception):
    """An alert with the same symbol and target price already exists"""
    pass


class PersistenceError(Exception):
    """The user snapshot could not be written"""
    pass
