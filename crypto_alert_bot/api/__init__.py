"""
Asynchronous clients for upstream quote providers.
"""

from .request_utilities import APIError
from .coinbase import AsyncCoinbaseAPI
from .coingecko import AsyncCoinGeckoAPI

__all__ = ["APIError", "AsyncCoinbaseAPI", "AsyncCoinGeckoAPI"]
