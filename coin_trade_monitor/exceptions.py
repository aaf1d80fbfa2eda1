"""
Custom exception hierarchy for Coin Trade Monitor.

Every failure the monitor can contain at the pair level derives from
TradeMonitorError, so the cycle can catch one family of errors while
exchange adapters and stores still raise something specific.
"""


class TradeMonitorError(Exception):
    """
    Base exception for all Coin Trade Monitor errors.

    All custom exceptions in the system inherit from this class,
    allowing for broad exception catching when needed while still
    maintaining a clear exception hierarchy.
    """


class ConfigurationError(TradeMonitorError, ValueError):
    """
    Raised when configuration validation fails or required configuration is missing.

    Examples: unknown exchange name, non-positive refresh interval,
    malformed default pair list.
    """


class ExchangeError(TradeMonitorError):
    """
    Base class for all exchange adapter errors.

    Parent class for price quote and order submission failures raised by
    the mock, ccxt, or any registered exchange backend.
    """


class PriceUnavailableError(ExchangeError):
    """
    Raised when an exchange cannot quote a coin against its base coin.

    Examples: unknown market symbol, empty ticker, network failure after
    retries, quote timeout.
    """


class OrderError(ExchangeError):
    """Base class for order submission failures."""


class OrderRejectedError(OrderError):
    """
    Raised when the exchange declines an order.

    Examples: insufficient funds, invalid order size, market closed.
    """


class OrderSubmissionError(OrderError):
    """
    Raised when an order could not be delivered to the exchange.

    Examples: connection refused, request timeout, DNS failure.
    """


class PersistenceError(TradeMonitorError):
    """
    Raised when the pair or order store cannot be read or written.
    """


class ComputationError(TradeMonitorError, ArithmeticError):
    """
    Raised when price inputs make the percent change undefined.

    Examples: zero current price, NaN or infinite quotes.
    """
