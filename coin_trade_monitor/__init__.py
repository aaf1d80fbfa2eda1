"""
Coin Trade Monitor

Watches coin prices on one or more exchanges and places a buy or sell order
whenever a pair moves far enough from the price of its last order.
"""

__version__ = "1.0.0"

from .core import CoinTradeMonitor
from .services import TradeMonitorService

__all__ = ["CoinTradeMonitor", "TradeMonitorService"]
