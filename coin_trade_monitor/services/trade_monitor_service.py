"""Price monitor that turns percent moves into exchange orders."""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Sequence

from .. import events
from ..events import EventEmitter
from ..exceptions import (
    ConfigurationError,
    OrderError,
    PersistenceError,
    TradeMonitorError,
)
from ..exchanges import BaseExchange, ExchangeRegistry
from ..models import CoinExchange, Order, OrderType
from ..monitoring.logging_config import CorrelationContext
from ..observability import create_counters, create_histograms, get_meter, get_tracer
from ..pricing import compute_price_change, validate_price
from .coin_exchange_service import CoinExchangeService
from .order_service import OrderService
from .scheduler import CycleScheduler

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

DEFAULT_REFRESH_INTERVAL_MS = 30000
DEFAULT_AMOUNT = 1


class MonitorState(Enum):
    """Represents the current state of the monitor."""

    IDLE = auto()
    LOADING_PAIRS = auto()
    INITIALIZING = auto()
    RUNNING_CYCLE = auto()
    STOPPED = auto()


@dataclass
class CoinCheckResult:
    """Outcome of one pair's evaluation within a cycle."""

    coin_exchange_id: str
    percent_change: Optional[float] = None
    order_type: OrderType = OrderType.NONE
    order: Optional[Order] = None
    error: Optional[str] = None


@dataclass
class CycleSummary:
    """What happened during one monitor cycle."""

    cycle: int
    results: List[CoinCheckResult] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def checked(self) -> int:
        return len(self.results)

    @property
    def orders(self) -> List[Order]:
        return [r.order for r in self.results if r.order is not None]

    @property
    def failures(self) -> List[CoinCheckResult]:
        return [r for r in self.results if r.error is not None]


class TradeMonitorService:
    """
    Periodically checks every tracked pair and places orders on large moves.

    Lifecycle: ``start()`` loads the pairs to trade (falling back to the
    default list), fills in baseline prices for pairs never seen before, then
    runs ``run_cycle()`` forever, ``refresh_interval`` milliseconds after the
    previous cycle completed.

    Within a cycle all pairs are checked concurrently. Each pair's own steps
    (fetch -> compute -> decide -> maybe order -> persist) run in order and
    any failure stays contained to that pair.
    """

    def __init__(
        self,
        coin_exchange_service: CoinExchangeService,
        order_service: OrderService,
        emitter: EventEmitter,
        coins_to_trade_default: Optional[Sequence[CoinExchange]] = None,
        refresh_interval: int = DEFAULT_REFRESH_INTERVAL_MS,
        exchange_registry: Optional[ExchangeRegistry] = None,
        max_cycles: Optional[int] = None,
    ):
        """
        Initialize the monitor.

        Args:
            coin_exchange_service: Source of tracked pairs and their persistence
            order_service: Order decision policy and order persistence
            emitter: Observer sink for lifecycle and progress events
            coins_to_trade_default: Pairs used when the source returns none
            refresh_interval: Delay between cycles in milliseconds
            exchange_registry: Cache of exchange adapters by name
            max_cycles: Stop after this many cycles (None runs forever)
        """
        if refresh_interval <= 0:
            raise ConfigurationError("refresh_interval must be a positive number of milliseconds")

        self.coin_exchange_service = coin_exchange_service
        self.order_service = order_service
        self.emitter = emitter
        self.coins_to_trade_default = list(coins_to_trade_default or [])
        self.refresh_interval = refresh_interval
        self.exchanges = exchange_registry or ExchangeRegistry()
        self.coins_to_trade: List[CoinExchange] = []
        self.state = MonitorState.IDLE
        self.cycle_count = 0
        self.last_summary: Optional[CycleSummary] = None
        self.scheduler = CycleScheduler(refresh_interval / 1000, max_cycles=max_cycles)

        meter = get_meter(__name__)
        self._counters = create_counters(meter)
        self._histograms = create_histograms(meter)

    def emit(self, event: str, *payload) -> None:
        self.emitter.emit(event, *payload)

    def _transition_to(self, new_state: MonitorState) -> None:
        old_state = self.state
        self.state = new_state
        logger.info(f"Transitioning {old_state.name} -> {new_state.name}")

    async def start(self) -> None:
        """Load and initialize the working set, then run cycles until stopped."""
        logger.info("Starting trade monitor...")
        self.emit(events.MONITOR_START)
        await self.load_coins()
        await self.initialize_coins()
        self._transition_to(MonitorState.RUNNING_CYCLE)
        try:
            await self.scheduler.run(self.run_cycle)
        finally:
            self._transition_to(MonitorState.STOPPED)

    def stop(self) -> None:
        """Stop scheduling cycles. The cycle in flight is allowed to finish."""
        logger.info("Stopping trade monitor...")
        self.scheduler.stop()

    async def load_coins(self) -> List[CoinExchange]:
        self._transition_to(MonitorState.LOADING_PAIRS)
        self.emit(events.MONITOR_LOAD_COINS)
        self.coins_to_trade = list(await self.coin_exchange_service.get_coins_to_trade())
        if not self.coins_to_trade:
            logger.info(
                f"No stored pairs to trade, using {len(self.coins_to_trade_default)} default pair(s)"
            )
            self.coins_to_trade = list(self.coins_to_trade_default)
        return self.coins_to_trade

    async def initialize_coins(self) -> None:
        self._transition_to(MonitorState.INITIALIZING)
        self.emit(events.MONITOR_INIT_COINS)
        for coin_exchange in self.coins_to_trade:
            await self.initialize_coin_price(coin_exchange)

    async def initialize_coin_price(self, coin_exchange: CoinExchange) -> None:
        """Fill baseline prices, amount and percent change for a pair seen for the first time."""
        if not coin_exchange.needs_initialization():
            return

        price_exchange = validate_price(await self.get_exchange_price(coin_exchange))
        coin_exchange.initialize_prices(price_exchange, default_amount=DEFAULT_AMOUNT)
        logger.info(f"Initialized {coin_exchange.id} at {price_exchange}")

    def get_exchange_adapter(self, name: str) -> BaseExchange:
        return self.exchanges.get_exchange(name)

    async def get_exchange_price(self, coin_exchange: CoinExchange) -> float:
        exchange = self.get_exchange_adapter(coin_exchange.exchange)
        return await exchange.aget_coin_price(coin_exchange.coin, coin_exchange.base_coin)

    async def run_cycle(self) -> CycleSummary:
        """Check every tracked pair concurrently and wait for all of them."""
        self.cycle_count += 1
        started = time.time()
        summary = CycleSummary(cycle=self.cycle_count)

        with CorrelationContext(), tracer.start_as_current_span("monitor.cycle") as span:
            span.set_attribute("monitor.cycle", self.cycle_count)
            span.set_attribute("monitor.pairs", len(self.coins_to_trade))
            self.emit(events.MONITOR_CYCLE, self.coins_to_trade)

            outcomes = await asyncio.gather(
                *(self.check_coin(c) for c in self.coins_to_trade),
                return_exceptions=True,
            )
            for coin_exchange, outcome in zip(self.coins_to_trade, outcomes):
                if isinstance(outcome, BaseException):
                    if isinstance(outcome, asyncio.CancelledError):
                        raise outcome
                    logger.error(
                        f"Unhandled error checking {coin_exchange.id}: {outcome}",
                        exc_info=outcome,
                    )
                    outcome = CoinCheckResult(coin_exchange.id, error=str(outcome))
                summary.results.append(outcome)

        summary.duration_seconds = time.time() - started
        self.last_summary = summary
        self._record_cycle(summary)
        logger.info(
            f"Cycle {summary.cycle} complete: {summary.checked} checked, "
            f"{len(summary.orders)} order(s), {len(summary.failures)} failure(s) "
            f"in {summary.duration_seconds:.2f}s"
        )
        return summary

    def _record_cycle(self, summary: CycleSummary) -> None:
        self._counters["ctm_cycles_total"].add(1)
        self._histograms["ctm_cycle_duration_seconds"].record(summary.duration_seconds)
        if summary.failures:
            self._counters["ctm_pair_failures_total"].add(len(summary.failures))

    async def check_coin(self, coin_exchange: CoinExchange) -> CoinCheckResult:
        """Evaluate one pair; always persists it, whatever happened before."""
        result = CoinCheckResult(coin_exchange.id)

        with tracer.start_as_current_span("monitor.check_coin") as span:
            span.set_attribute("monitor.pair_id", coin_exchange.id)
            self.emit(events.MONITOR_CHECK_COIN, coin_exchange)

            try:
                result.order_type = await self.get_order_type(coin_exchange)
                result.percent_change = coin_exchange.price_change
            except TradeMonitorError as e:
                logger.warning(f"Skipping {coin_exchange.id} this cycle: {e}")
                result.error = str(e)
                self.emit(events.MONITOR_COIN_ERROR, coin_exchange, e)
            except Exception as e:
                logger.error(f"Unexpected error checking {coin_exchange.id}: {e}", exc_info=True)
                result.error = str(e)
                self.emit(events.MONITOR_COIN_ERROR, coin_exchange, e)

            if result.order_type != OrderType.NONE:
                try:
                    result.order = await self.make_order(coin_exchange, result.order_type)
                except OrderError as e:
                    logger.warning(f"Order {result.order_type.value} failed for {coin_exchange.id}: {e}")
                    result.error = str(e)
                    self.emit(events.MONITOR_ORDER_FAILED, coin_exchange, result.order_type, e)
                except PersistenceError as e:
                    logger.error(f"Order for {coin_exchange.id} placed but not recorded: {e}")
                    result.error = str(e)
                    self.emit(events.MONITOR_PERSISTENCE_ERROR, coin_exchange, e)
                except Exception as e:
                    logger.error(f"Unexpected error ordering {coin_exchange.id}: {e}", exc_info=True)
                    result.error = str(e)
                    self.emit(events.MONITOR_ORDER_FAILED, coin_exchange, result.order_type, e)

            try:
                await self.coin_exchange_service.save_coin_exchange(coin_exchange)
            except PersistenceError as e:
                logger.error(f"Failed to save {coin_exchange.id}: {e}")
                result.error = str(e)
                self.emit(events.MONITOR_PERSISTENCE_ERROR, coin_exchange, e)

            if result.error:
                span.set_attribute("monitor.error", result.error)

        return result

    async def get_order_type(self, coin_exchange: CoinExchange) -> OrderType:
        percent_change = await self.get_price_changes(coin_exchange)
        self.emit(events.MONITOR_PRICE_CHANGE, coin_exchange, percent_change)
        return await self.order_service.get_next_order_type(coin_exchange.id, percent_change)

    async def get_price_changes(self, coin_exchange: CoinExchange) -> float:
        """Fetch a fresh price and store it with its percent change on the pair."""
        price_exchange = await self.get_exchange_price(coin_exchange)
        percent_change = compute_price_change(coin_exchange.price_order, price_exchange)
        coin_exchange.price_exchange = price_exchange
        coin_exchange.price_change = percent_change
        return percent_change

    async def make_order(self, coin_exchange: CoinExchange, order_type: OrderType) -> Optional[Order]:
        self.emit(events.MONITOR_MAKE_ORDER, coin_exchange, order_type)
        exchange_order_id = await self.create_exchange_order(coin_exchange, order_type)
        if not exchange_order_id:
            return None

        coin_exchange.price_order = coin_exchange.price_exchange
        order = await self.order_service.save_order(coin_exchange, exchange_order_id, order_type)
        self.emit(events.MONITOR_ORDER_DONE, coin_exchange, order_type)
        return order

    async def create_exchange_order(
        self, coin_exchange: CoinExchange, order_type: OrderType
    ) -> Optional[str]:
        if not OrderService.is_valid_order_type(order_type):
            return None

        exchange = self.get_exchange_adapter(coin_exchange.exchange)
        if OrderType(order_type) == OrderType.SELL:
            response = await exchange.asell_coin(coin_exchange)
        else:
            response = await exchange.abuy_coin(coin_exchange)
        return response.get("order_id")
