"""Monitor services: pair source, order decisions, scheduling and the monitor itself."""

from .coin_exchange_service import CoinExchangeService
from .order_policy import OrderPolicy, ThresholdOrderPolicy
from .order_service import OrderService
from .scheduler import CycleScheduler
from .trade_monitor_service import (
    CoinCheckResult,
    CycleSummary,
    MonitorState,
    TradeMonitorService,
)

__all__ = [
    "CoinExchangeService",
    "OrderPolicy",
    "ThresholdOrderPolicy",
    "OrderService",
    "CycleScheduler",
    "CoinCheckResult",
    "CycleSummary",
    "MonitorState",
    "TradeMonitorService",
]
