"""Append-only storage for orders accepted by an exchange."""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models import Order
from .file_io import append_json_lines, iter_json_lines

logger = logging.getLogger(__name__)


class OrderStore:
    """
    Order history kept as a JSON-lines file.

    Orders are immutable, so the store only ever appends.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize the order store.

        Args:
            config: Configuration dictionary containing:
                - data_dir: Directory holding the store files
                - orders_file: File name of the order log
        """
        self.path = Path(config.get("data_dir", "data")) / config.get(
            "orders_file", "orders.jsonl"
        )
        self._lock = threading.Lock()
        logger.info(f"Order store initialized at {self.path}")

    def append(self, order: Order) -> None:
        with self._lock:
            append_json_lines(self.path, [order.to_dict()])
        logger.info(
            f"Order saved: {order.order_type.value} {order.coin_exchange_id} "
            f"(exchange order {order.exchange_order_id})"
        )

    def get_orders(
        self, coin_exchange_id: Optional[str] = None, limit: Optional[int] = None
    ) -> List[Order]:
        """
        Retrieve stored orders, oldest first.

        Args:
            coin_exchange_id: Optional filter by tracked pair
            limit: Keep only the most recent ``limit`` orders
        """
        with self._lock:
            records = list(iter_json_lines(self.path))

        orders = [
            Order.from_dict(record)
            for record in records
            if coin_exchange_id is None or record.get("coin_exchange_id") == coin_exchange_id
        ]
        if limit is not None:
            orders = orders[-limit:] if limit > 0 else []
        return orders
