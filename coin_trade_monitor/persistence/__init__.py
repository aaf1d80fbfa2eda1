"""Persistence layer for tracked pairs and orders."""

from .coin_exchange_store import CoinExchangeStore
from .order_store import OrderStore

__all__ = ["CoinExchangeStore", "OrderStore"]
