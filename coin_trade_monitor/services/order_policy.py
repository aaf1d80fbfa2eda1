"""Order decision policies."""

import logging
from typing import Dict, Iterable, Protocol

from ..models import Order, OrderType

logger = logging.getLogger(__name__)


class OrderPolicy(Protocol):
    """Maps a pair's percent price change to BUY, SELL or NONE."""

    def decide(self, pair_id: str, percent_change: float) -> OrderType: ...

    def record_order(self, pair_id: str, order_type: OrderType) -> None: ...


class ThresholdOrderPolicy:
    """
    Single-threshold trigger policy.

    SELL once the price has risen ``sell_threshold`` percent above the
    reference price, BUY once it has fallen ``buy_threshold`` percent below.
    With ``alternate`` enabled a pair never repeats the side of its last
    accepted order, so a pair that was just bought is not bought again.
    """

    def __init__(
        self,
        buy_threshold: float = 5.0,
        sell_threshold: float = 5.0,
        alternate: bool = True,
    ):
        if buy_threshold <= 0 or sell_threshold <= 0:
            raise ValueError("Order thresholds must be positive percentages")
        self.buy_threshold = buy_threshold
        self.sell_threshold = sell_threshold
        self.alternate = alternate
        self._last_order: Dict[str, OrderType] = {}

    def decide(self, pair_id: str, percent_change: float) -> OrderType:
        if percent_change >= self.sell_threshold:
            candidate = OrderType.SELL
        elif percent_change <= -self.buy_threshold:
            candidate = OrderType.BUY
        else:
            return OrderType.NONE

        if self.alternate and self._last_order.get(pair_id) == candidate:
            logger.debug(f"{pair_id}: last order was already {candidate.value}, holding")
            return OrderType.NONE
        return candidate

    def record_order(self, pair_id: str, order_type: OrderType) -> None:
        self._last_order[pair_id] = OrderType(order_type)

    def seed(self, orders: Iterable[Order]) -> None:
        """Restore the last order side per pair from history (oldest first)."""
        for order in orders:
            self._last_order[order.coin_exchange_id] = order.order_type

    def last_order(self, pair_id: str):
        return self._last_order.get(pair_id)
