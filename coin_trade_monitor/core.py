"""Wires configuration, stores, exchanges and services into a runnable monitor."""

import asyncio
import logging
from typing import Any, Dict, Optional, Union

from .config import MonitorConfig, load_config_from_dict
from .events import WILDCARD, EventBuffer, EventEmitter, LoggingEventListener
from .exchanges import ExchangeRegistry
from .persistence import CoinExchangeStore, OrderStore
from .services import (
    CoinExchangeService,
    OrderService,
    ThresholdOrderPolicy,
    TradeMonitorService,
)

logger = logging.getLogger(__name__)


class CoinTradeMonitor:
    """
    Application object owning every long-lived component of the monitor.

    Usage:
        app = CoinTradeMonitor(load_config_from_file("config/config.yaml"))
        asyncio.run(app.run())
    """

    def __init__(
        self,
        config: Union[MonitorConfig, Dict[str, Any], None] = None,
        emitter: Optional[EventEmitter] = None,
        policy=None,
        max_cycles: Optional[int] = None,
        log_events: bool = True,
    ):
        """
        Build the monitor from configuration.

        Args:
            config: Validated config or a raw dict to validate
            emitter: Observer sink (a fresh EventEmitter when omitted)
            policy: Order decision policy (ThresholdOrderPolicy from config when omitted)
            max_cycles: Stop after this many cycles (None runs forever)
            log_events: Forward every monitor event to the log
        """
        if not isinstance(config, MonitorConfig):
            config = load_config_from_dict(config)
        self.config = config

        self.emitter = emitter or EventEmitter()
        self.event_buffer = EventBuffer(maxlen=config.event_buffer_size)
        self.emitter.on(WILDCARD, self.event_buffer)
        if log_events:
            self.emitter.on(WILDCARD, LoggingEventListener())

        storage = config.storage.model_dump()
        self.coin_exchange_store = CoinExchangeStore(storage)
        self.order_store = OrderStore(storage)

        if policy is None:
            policy = ThresholdOrderPolicy(
                buy_threshold=config.policy.buy_threshold,
                sell_threshold=config.policy.sell_threshold,
                alternate=config.policy.alternate,
            )
            policy.seed(self.order_store.get_orders())
        self.policy = policy

        self.exchange_registry = ExchangeRegistry(config.exchange_settings())
        self.coin_exchange_service = CoinExchangeService(self.coin_exchange_store)
        self.order_service = OrderService(self.order_store, self.policy)

        self.monitor = TradeMonitorService(
            coin_exchange_service=self.coin_exchange_service,
            order_service=self.order_service,
            emitter=self.emitter,
            coins_to_trade_default=config.default_coin_exchanges(),
            refresh_interval=config.refresh_interval_ms,
            exchange_registry=self.exchange_registry,
            max_cycles=max_cycles,
        )

        logger.info(
            f"CoinTradeMonitor ready: {len(config.default_pairs)} default pair(s), "
            f"refresh every {config.refresh_interval_ms}ms"
        )

    async def run(self) -> None:
        try:
            await self.monitor.start()
        finally:
            self.close()

    def stop(self) -> None:
        self.monitor.stop()

    def close(self) -> None:
        self.exchange_registry.close_all()

    def run_forever(self) -> None:
        """Blocking entry point; Ctrl+C stops the loop."""
        try:
            asyncio.run(self.run())
        except KeyboardInterrupt:
            logger.info("Interrupted, monitor stopped")
