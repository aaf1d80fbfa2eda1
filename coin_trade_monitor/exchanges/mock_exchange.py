"""Mock exchange for dry runs and tests without real APIs."""

import itertools
import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from ..exceptions import OrderRejectedError, PriceUnavailableError
from ..models import CoinExchange, OrderType, utc_now_iso
from .base_exchange import BaseExchange, OrderResult

logger = logging.getLogger(__name__)


class MockExchange(BaseExchange):
    """
    In-memory exchange that quotes configured prices and fills every order.

    Ideal for:
    - Dry runs of the monitor without touching a live account
    - Tests that need deterministic prices and order ids
    - Failure injection (unquotable pairs, rejected orders)
    """

    name = "mock"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize mock exchange.

        Args:
            config: Optional settings:
                - prices: mapping of "COIN/BASE" (or "COIN-BASE") to price
                - reject_orders: if True every order is rejected
                - call_timeout: seconds, see BaseExchange
        """
        super().__init__(config)

        self._prices: Dict[Tuple[str, str], float] = {}
        for symbol, price in (self.config.get("prices") or {}).items():
            coin, base_coin = self._split_symbol(symbol)
            self.set_price(coin, base_coin, price)

        self.reject_orders: bool = bool(self.config.get("reject_orders", False))
        self.fail_prices_for: Set[Tuple[str, str]] = set()
        self.orders: List[Dict[str, Any]] = []
        self._order_ids = itertools.count(1)

        logger.info("MockExchange initialized with %d price(s)", len(self._prices))

    @staticmethod
    def _split_symbol(symbol: str) -> Tuple[str, str]:
        for separator in ("/", "-"):
            if separator in symbol:
                coin, base_coin = symbol.split(separator, 1)
                return coin.upper(), base_coin.upper()
        raise ValueError(f"Mock price symbol must look like COIN/BASE, got {symbol!r}")

    def set_price(self, coin: str, base_coin: str, price: float) -> None:
        self._prices[(coin.upper(), base_coin.upper())] = float(price)

    def fail_price(self, coin: str, base_coin: str) -> None:
        """Make every quote for the pair raise PriceUnavailableError."""
        self.fail_prices_for.add((coin.upper(), base_coin.upper()))

    def get_coin_price(self, coin: str, base_coin: str) -> float:
        key = (coin.upper(), base_coin.upper())
        if key in self.fail_prices_for or key not in self._prices:
            raise PriceUnavailableError(f"mock has no quote for {key[0]}/{key[1]}")
        logger.debug("MockExchange.get_coin_price(%s/%s) = %s", key[0], key[1], self._prices[key])
        return self._prices[key]

    def _fill(self, coin_exchange: CoinExchange, order_type: OrderType) -> OrderResult:
        if self.reject_orders:
            raise OrderRejectedError(
                f"mock rejected {order_type.value} {coin_exchange.symbol}"
            )

        price = self.get_coin_price(coin_exchange.coin, coin_exchange.base_coin)
        order_id = f"mock-{next(self._order_ids)}"
        self.orders.append(
            {
                "order_id": order_id,
                "order_type": order_type.value,
                "coin": coin_exchange.coin,
                "base_coin": coin_exchange.base_coin,
                "amount": coin_exchange.amount,
                "price": price,
                "timestamp": utc_now_iso(),
            }
        )
        logger.info(
            "MockExchange filled %s %s %s @ %.8f",
            order_type.value, coin_exchange.amount, coin_exchange.symbol, price,
        )
        return {"order_id": order_id, "status": "FILLED", "price": price, "amount": coin_exchange.amount}

    def buy_coin(self, coin_exchange: CoinExchange) -> OrderResult:
        return self._fill(coin_exchange, OrderType.BUY)

    def sell_coin(self, coin_exchange: CoinExchange) -> OrderResult:
        return self._fill(coin_exchange, OrderType.SELL)
