"""Exchange adapters module initialization."""

from .base_exchange import BaseExchange, OrderResult
from .ccxt_exchange import CcxtExchange
from .exchange_factory import ExchangeFactory, ExchangeRegistry
from .mock_exchange import MockExchange

__all__ = [
    "BaseExchange",
    "OrderResult",
    "CcxtExchange",
    "MockExchange",
    "ExchangeFactory",
    "ExchangeRegistry",
]
