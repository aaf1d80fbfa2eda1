import logging
import os
import sys

import pytest

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from coin_trade_monitor.events import WILDCARD, EventBuffer, EventEmitter
from coin_trade_monitor.exchanges import ExchangeRegistry, MockExchange
from coin_trade_monitor.models import CoinExchange
from coin_trade_monitor.persistence import CoinExchangeStore, OrderStore
from coin_trade_monitor.services import (
    CoinExchangeService,
    OrderService,
    ThresholdOrderPolicy,
    TradeMonitorService,
)


# --- Logging Configuration Fixture ---
# Handlers installed by setup_logging() may point at streams the test runner
# closes, which leads to "I/O operation on closed file" errors later on.

@pytest.fixture(autouse=True)
def configure_test_logging():
    """Drop root handlers a test installed (e.g. via setup_logging) once it ends."""
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level

    yield

    for handler in root_logger.handlers[:]:
        if handler not in saved_handlers:
            handler.close()
            root_logger.removeHandler(handler)
    root_logger.setLevel(saved_level)


class StaticExchangeFactory:
    """Factory stand-in that hands out pre-built exchange instances."""

    def __init__(self, exchanges):
        self.exchanges = exchanges
        self.created = []

    def create_exchange(self, name, config=None):
        self.created.append(name)
        return self.exchanges[name]


@pytest.fixture
def mock_exchange():
    """Mock exchange quoting BTC/USD at 100 and ETH/USD at 10."""
    return MockExchange({"prices": {"BTC/USD": 100.0, "ETH/USD": 10.0}})


@pytest.fixture
def exchange_registry(mock_exchange):
    return ExchangeRegistry(factory=StaticExchangeFactory({"mock": mock_exchange}))


@pytest.fixture
def storage_config(tmp_path):
    return {"data_dir": str(tmp_path / "data")}


@pytest.fixture
def coin_exchange_store(storage_config):
    return CoinExchangeStore(storage_config)


@pytest.fixture
def order_store(storage_config):
    return OrderStore(storage_config)


@pytest.fixture
def emitter():
    return EventEmitter()


@pytest.fixture
def event_buffer(emitter):
    buffer = EventBuffer(maxlen=500)
    emitter.on(WILDCARD, buffer)
    return buffer


@pytest.fixture
def make_pair():
    """Build an already-initialized pair whose reference price is ``price_order``."""

    def _make(coin="BTC", base_coin="USD", exchange="mock", price_order=100.0, amount=1.0):
        return CoinExchange(
            coin=coin,
            base_coin=base_coin,
            exchange=exchange,
            amount=amount,
            price_exchange=price_order,
            price_order=price_order,
            price_start=price_order,
            price_change=0.0,
        )

    return _make


@pytest.fixture
def make_monitor(coin_exchange_store, order_store, emitter, exchange_registry):
    """Build a TradeMonitorService over tmp_path stores and the mock exchange."""

    def _make(
        policy=None,
        defaults=None,
        coin_exchange_service=None,
        refresh_interval=1,
        max_cycles=None,
    ):
        policy = policy or ThresholdOrderPolicy(buy_threshold=5.0, sell_threshold=5.0)
        return TradeMonitorService(
            coin_exchange_service=coin_exchange_service or CoinExchangeService(coin_exchange_store),
            order_service=OrderService(order_store, policy),
            emitter=emitter,
            coins_to_trade_default=defaults,
            refresh_interval=refresh_interval,
            exchange_registry=exchange_registry,
            max_cycles=max_cycles,
        )

    return _make
