"""Exchange factory and the per-name adapter registry."""

import logging
import threading
from typing import Any, Dict, List, Optional

import ccxt

from ..exceptions import ConfigurationError
from .base_exchange import BaseExchange
from .ccxt_exchange import CcxtExchange
from .mock_exchange import MockExchange

logger = logging.getLogger(__name__)

CCXT_PREFIX = "ccxt:"


class ExchangeFactory:
    """
    Factory for creating exchange adapter instances.

    Names registered in ``_exchanges`` map to adapter classes. Any other name
    is tried as a ccxt exchange id, either bare ("binance") or prefixed
    ("ccxt:binance").
    """

    _exchanges = {
        "mock": MockExchange,
    }

    @classmethod
    def create_exchange(
        cls, exchange_name: str, config: Optional[Dict[str, Any]] = None
    ) -> BaseExchange:
        """
        Create an exchange adapter instance.

        Args:
            exchange_name: Name of the exchange (e.g., 'mock', 'binance')
            config: Exchange-specific settings

        Returns:
            Exchange adapter instance

        Raises:
            ConfigurationError: If the exchange is not supported
        """
        name = exchange_name.lower()
        config = config or {}

        if name in cls._exchanges:
            logger.info("Creating exchange instance: %s", name)
            return cls._exchanges[name](config)

        ccxt_id = name[len(CCXT_PREFIX):] if name.startswith(CCXT_PREFIX) else name
        if ccxt_id in ccxt.exchanges:
            logger.info("Creating ccxt exchange instance: %s", ccxt_id)
            return CcxtExchange(ccxt_id, config)

        available = ", ".join(cls.list_exchanges())
        raise ConfigurationError(
            f"Exchange '{exchange_name}' not supported. "
            f"Available exchanges: {available} or any ccxt exchange id"
        )

    @classmethod
    def register_exchange(cls, exchange_name: str, exchange_class: type) -> None:
        """
        Register a new exchange adapter class.

        Raises:
            ValueError: If exchange_class doesn't inherit from BaseExchange
        """
        if not isinstance(exchange_class, type) or not issubclass(exchange_class, BaseExchange):
            raise ValueError(f"{exchange_class} must inherit from BaseExchange")

        cls._exchanges[exchange_name.lower()] = exchange_class
        logger.info("Registered new exchange: %s", exchange_name)

    @classmethod
    def list_exchanges(cls) -> List[str]:
        return list(cls._exchanges.keys())


class ExchangeRegistry:
    """
    Lazily built, process-wide cache of exchange adapters keyed by name.

    Each adapter is constructed once, on first use. Construction runs under a
    lock so concurrent first calls never build two instances. If construction
    raises, nothing is cached and the next call tries again. There is no
    eviction.
    """

    def __init__(
        self,
        exchange_configs: Optional[Dict[str, Dict[str, Any]]] = None,
        factory: type = ExchangeFactory,
    ):
        self._configs = {k.lower(): v for k, v in (exchange_configs or {}).items()}
        self._factory = factory
        self._exchanges: Dict[str, BaseExchange] = {}
        self._lock = threading.Lock()

    def get_exchange(self, name: str) -> BaseExchange:
        key = name.lower()
        exchange = self._exchanges.get(key)
        if exchange is not None:
            return exchange

        with self._lock:
            exchange = self._exchanges.get(key)
            if exchange is None:
                exchange = self._factory.create_exchange(key, self._configs.get(key))
                self._exchanges[key] = exchange
        return exchange

    def names(self) -> List[str]:
        return list(self._exchanges.keys())

    def close_all(self) -> None:
        for name, exchange in self._exchanges.items():
            try:
                exchange.close()
            except Exception as e:
                logger.warning(f"Failed to close exchange {name}: {e}")
