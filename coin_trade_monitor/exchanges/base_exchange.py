"""Base exchange adapter interface."""

import asyncio
import inspect
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, TypedDict

from ..exceptions import (
    ExchangeError,
    OrderError,
    OrderRejectedError,
    OrderSubmissionError,
    PriceUnavailableError,
)
from ..models import CoinExchange, OrderType

logger = logging.getLogger(__name__)


class OrderResult(TypedDict, total=False):
    """Payload returned by buy_coin/sell_coin."""

    order_id: str
    status: str
    price: float
    amount: float


class BaseExchange(ABC):
    """
    Abstract base class for exchange integrations.

    Implementations provide ``get_coin_price``, ``buy_coin`` and ``sell_coin``
    either as plain or as coroutine functions. The monitor only calls the
    async wrappers (``aget_coin_price``, ``abuy_coin``, ``asell_coin``), which
    keep sync backends off the event loop, enforce the optional per-call
    timeout and translate failures into the monitor's exception hierarchy.
    """

    name = "base"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the exchange.

        Args:
            config: Exchange-specific settings. ``call_timeout`` (seconds)
                bounds every remote call; None disables the bound.
        """
        self.config = config or {}
        self.call_timeout: Optional[float] = self.config.get("call_timeout")

        try:
            from ..observability.metrics import (
                create_counters,
                create_histograms,
                get_meter,
            )

            self._meter = get_meter(__name__)
            self._counters = create_counters(self._meter)
            self._histograms = create_histograms(self._meter)
        except Exception as e:
            logger.warning(f"Failed to initialize metrics for {self.__class__.__name__}: {e}")
            self._meter = None
            self._counters = {}
            self._histograms = {}

    async def _run_async(self, func, *args, **kwargs):
        """Run a possibly-sync exchange call without blocking the event loop."""
        if inspect.iscoroutinefunction(func):
            call = func(*args, **kwargs)
        else:
            call = asyncio.to_thread(func, *args, **kwargs)
        if self.call_timeout:
            return await asyncio.wait_for(call, timeout=self.call_timeout)
        return await call

    def _record_latency(self, operation: str, started: float, status: str) -> None:
        histogram = self._histograms.get("ctm_exchange_latency_seconds")
        if histogram:
            histogram.record(
                time.time() - started,
                attributes={"exchange": self.name, "operation": operation, "status": status},
            )

    @abstractmethod
    def get_coin_price(self, coin: str, base_coin: str) -> float:
        """
        Get the current market price of ``coin`` in ``base_coin``.

        Raises:
            PriceUnavailableError: If the pair cannot be quoted
        """
        pass

    async def aget_coin_price(self, coin: str, base_coin: str) -> float:
        """Async adapter for get_coin_price."""
        started = time.time()
        if self._counters.get("ctm_price_checks_total"):
            self._counters["ctm_price_checks_total"].add(1, attributes={"exchange": self.name})
        try:
            price = await self._run_async(self.get_coin_price, coin, base_coin)
        except asyncio.TimeoutError as e:
            self._record_latency("get_coin_price", started, "timeout")
            raise PriceUnavailableError(
                f"{self.name} did not quote {coin}/{base_coin} within {self.call_timeout}s"
            ) from e
        except ExchangeError:
            self._record_latency("get_coin_price", started, "failed")
            raise
        except Exception as e:
            self._record_latency("get_coin_price", started, "failed")
            raise PriceUnavailableError(
                f"{self.name} failed to quote {coin}/{base_coin}: {type(e).__name__}: {e}"
            ) from e

        self._record_latency("get_coin_price", started, "success")
        if price is None:
            raise PriceUnavailableError(f"{self.name} returned no price for {coin}/{base_coin}")
        return float(price)

    @abstractmethod
    def buy_coin(self, coin_exchange: CoinExchange) -> OrderResult:
        """
        Submit a buy order sized by ``coin_exchange.amount``.

        Returns:
            Order result carrying the exchange-assigned ``order_id``
        """
        pass

    @abstractmethod
    def sell_coin(self, coin_exchange: CoinExchange) -> OrderResult:
        """Submit a sell order sized by ``coin_exchange.amount``."""
        pass

    async def abuy_coin(self, coin_exchange: CoinExchange) -> OrderResult:
        """Async adapter for buy_coin."""
        return await self._submit(self.buy_coin, coin_exchange, OrderType.BUY)

    async def asell_coin(self, coin_exchange: CoinExchange) -> OrderResult:
        """Async adapter for sell_coin."""
        return await self._submit(self.sell_coin, coin_exchange, OrderType.SELL)

    async def _submit(self, func, coin_exchange: CoinExchange, order_type: OrderType) -> OrderResult:
        started = time.time()
        operation = f"{order_type.value.lower()}_coin"
        try:
            result = await self._run_async(func, coin_exchange)
        except asyncio.TimeoutError as e:
            self._record_failure(operation, started, "OrderTimeout")
            raise OrderSubmissionError(
                f"{self.name} {order_type.value} {coin_exchange.symbol} timed out "
                f"after {self.call_timeout}s"
            ) from e
        except OrderError as e:
            self._record_failure(operation, started, type(e).__name__)
            raise
        except ExchangeError as e:
            self._record_failure(operation, started, type(e).__name__)
            raise OrderSubmissionError(
                f"{self.name} {order_type.value} {coin_exchange.symbol} failed: {e}"
            ) from e
        except Exception as e:
            logger.error(
                f"Order submission failed on {self.name} for {coin_exchange.symbol}: {e}",
                exc_info=True,
            )
            self._record_failure(operation, started, type(e).__name__)
            raise OrderSubmissionError(
                f"{self.name} {order_type.value} {coin_exchange.symbol} failed: "
                f"{type(e).__name__}: {e}"
            ) from e

        if not result or not result.get("order_id"):
            self._record_failure(operation, started, "MissingOrderId")
            raise OrderRejectedError(
                f"{self.name} returned no order id for {order_type.value} {coin_exchange.symbol}"
            )

        self._record_latency(operation, started, "success")
        if self._counters.get("ctm_orders_submitted_total"):
            self._counters["ctm_orders_submitted_total"].add(
                1, attributes={"exchange": self.name, "order_type": order_type.value}
            )
        logger.info(
            f"Order placed on {self.name}: {order_type.value} {coin_exchange.amount} "
            f"{coin_exchange.symbol} (order_id={result['order_id']}, "
            f"latency: {time.time() - started:.2f}s)"
        )
        return result

    def _record_failure(self, operation: str, started: float, error_type: str) -> None:
        self._record_latency(operation, started, "failed")
        if self._counters.get("ctm_order_failures_total"):
            self._counters["ctm_order_failures_total"].add(
                1,
                attributes={"exchange": self.name, "operation": operation, "error_type": error_type},
            )

    def close(self) -> None:
        """Release backend resources. Default is a no-op."""
