"""Order decisions and order bookkeeping."""

import asyncio
import inspect
import logging
from typing import Any

from ..models import CoinExchange, Order, OrderType
from ..persistence import OrderStore
from .order_policy import OrderPolicy

logger = logging.getLogger(__name__)


class OrderService:
    """Asks the decision policy for the next order and records accepted orders."""

    ORDER_BUY = OrderType.BUY
    ORDER_SELL = OrderType.SELL
    ORDER_NONE = OrderType.NONE

    def __init__(self, store: OrderStore, policy: OrderPolicy):
        self.store = store
        self.policy = policy

    @staticmethod
    def is_valid_order_type(order_type: Any) -> bool:
        return OrderType.is_valid(order_type)

    async def get_next_order_type(self, coin_exchange_id: str, percent_change: float) -> OrderType:
        decision = self.policy.decide(coin_exchange_id, percent_change)
        if inspect.isawaitable(decision):
            decision = await decision

        try:
            return OrderType(decision)
        except ValueError:
            raise ValueError(
                f"Order policy returned {decision!r} for {coin_exchange_id}; "
                f"expected one of {[t.value for t in OrderType]}"
            ) from None

    async def save_order(
        self, coin_exchange: CoinExchange, exchange_order_id: str, order_type: OrderType
    ) -> Order:
        order = Order.for_pair(coin_exchange, exchange_order_id, order_type)
        try:
            await asyncio.to_thread(self.store.append, order)
        finally:
            # The exchange already accepted it, so alternation must advance.
            self.policy.record_order(coin_exchange.id, order.order_type)
        return order
