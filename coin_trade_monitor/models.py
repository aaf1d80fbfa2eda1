"""Domain models for tracked coin/exchange pairs and the orders placed on them."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class OrderType(str, Enum):
    """Outcome of an order decision."""

    BUY = "BUY"
    SELL = "SELL"
    NONE = "NONE"

    @classmethod
    def is_valid(cls, order_type: Any) -> bool:
        """Return True only for order types that can be submitted to an exchange."""
        try:
            return cls(order_type) in (cls.BUY, cls.SELL)
        except ValueError:
            return False


def make_pair_id(exchange: str, coin: str, base_coin: str) -> str:
    """Stable identifier for a (coin, base coin, exchange) triple."""
    return f"{exchange.lower()}:{coin.upper()}-{base_coin.upper()}"


def _is_unset(value: Optional[float]) -> bool:
    # A zero price or amount is as useless as a missing one.
    return value is None or value == 0


@dataclass
class CoinExchange:
    """
    One coin monitored against one base coin on one exchange.

    The monitor mutates an instance in place during a cycle and persists it
    at the end of each per-pair evaluation. ``price_start`` is written once
    and never changed afterwards.

    Attributes:
        id: Unique identifier of the tracked pair
        coin: Traded coin symbol (e.g. BTC)
        base_coin: Quote currency symbol (e.g. USD)
        exchange: Name of the exchange backend
        amount: Quantity bought or sold per order
        price_exchange: Most recently fetched exchange price
        price_order: Reference price of the last order (or initialization)
        price_start: First price ever seen for this pair
        price_change: Last computed percent change against price_order
        updated_at: ISO timestamp of the last persisted update
    """

    coin: str
    base_coin: str
    exchange: str
    id: Optional[str] = None
    amount: Optional[float] = None
    price_exchange: Optional[float] = None
    price_order: Optional[float] = None
    price_start: Optional[float] = None
    price_change: Optional[float] = None
    updated_at: Optional[str] = None

    def __post_init__(self):
        self.coin = self.coin.upper()
        self.base_coin = self.base_coin.upper()
        if not self.id:
            self.id = make_pair_id(self.exchange, self.coin, self.base_coin)

    @property
    def symbol(self) -> str:
        return f"{self.coin}/{self.base_coin}"

    def needs_initialization(self) -> bool:
        return (
            _is_unset(self.price_order)
            or _is_unset(self.price_start)
            or _is_unset(self.price_exchange)
            or _is_unset(self.amount)
            or self.price_change is None
        )

    def set_price_start(self, price: float) -> None:
        if not _is_unset(self.price_start):
            raise ValueError(
                f"Starting price of {self.id} is already set to {self.price_start}"
            )
        self.price_start = price

    def initialize_prices(self, price: float, default_amount: float = 1) -> None:
        """Fill every absent baseline field from a single fetched price."""
        if _is_unset(self.price_order):
            self.price_order = price
        if _is_unset(self.price_start):
            self.set_price_start(price)
        if _is_unset(self.price_exchange):
            self.price_exchange = price
        if _is_unset(self.amount):
            self.amount = default_amount
        if self.price_change is None:
            self.price_change = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "coin": self.coin,
            "base_coin": self.base_coin,
            "exchange": self.exchange,
            "amount": self.amount,
            "price_exchange": self.price_exchange,
            "price_order": self.price_order,
            "price_start": self.price_start,
            "price_change": self.price_change,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CoinExchange":
        return cls(
            id=data.get("id"),
            coin=data["coin"],
            base_coin=data["base_coin"],
            exchange=data["exchange"],
            amount=data.get("amount"),
            price_exchange=data.get("price_exchange"),
            price_order=data.get("price_order"),
            price_start=data.get("price_start"),
            price_change=data.get("price_change"),
            updated_at=data.get("updated_at"),
        )


@dataclass(frozen=True)
class Order:
    """An order accepted by an exchange. Never modified after creation."""

    coin_exchange_id: str
    coin: str
    base_coin: str
    exchange: str
    order_type: OrderType
    exchange_order_id: str
    price: Optional[float] = None
    amount: Optional[float] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: str = field(default_factory=utc_now_iso)

    @classmethod
    def for_pair(
        cls, pair: CoinExchange, exchange_order_id: str, order_type: OrderType
    ) -> "Order":
        return cls(
            coin_exchange_id=pair.id,
            coin=pair.coin,
            base_coin=pair.base_coin,
            exchange=pair.exchange,
            order_type=OrderType(order_type),
            exchange_order_id=str(exchange_order_id),
            price=pair.price_exchange,
            amount=pair.amount,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "coin_exchange_id": self.coin_exchange_id,
            "coin": self.coin,
            "base_coin": self.base_coin,
            "exchange": self.exchange,
            "order_type": self.order_type.value,
            "exchange_order_id": self.exchange_order_id,
            "price": self.price,
            "amount": self.amount,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        return cls(
            id=data["id"],
            coin_exchange_id=data["coin_exchange_id"],
            coin=data["coin"],
            base_coin=data["base_coin"],
            exchange=data["exchange"],
            order_type=OrderType(data["order_type"]),
            exchange_order_id=data["exchange_order_id"],
            price=data.get("price"),
            amount=data.get("amount"),
            created_at=data["created_at"],
        )
