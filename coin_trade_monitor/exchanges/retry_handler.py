"""Retry handling for idempotent exchange reads.

Price quotes can safely be retried on transient transport errors. Order
submission is never retried here: a resent market order could fill twice.
"""

import logging
from functools import wraps
from typing import Any, Callable, Optional, Tuple, Type

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)


def quote_retry(
    max_attempts: int = 3,
    min_wait: float = 0.5,
    max_wait: float = 5,
    retry_on: Optional[Tuple[Type[Exception], ...]] = None,
):
    """
    Decorator for price quote methods that retries with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts (default: 3)
        min_wait: Minimum wait in seconds between attempts
        max_wait: Maximum wait in seconds between attempts
        retry_on: Exception types to retry (default: connection/timeout errors)

    Example:
        @quote_retry(max_attempts=3, retry_on=(ccxt.NetworkError,))
        def _fetch_last_price(self, symbol):
            return self.client.fetch_ticker(symbol)["last"]
    """
    if retry_on is None:
        retry_on = (ConnectionError, TimeoutError)

    def decorator(func: Callable) -> Callable:
        @retry(
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
            retry=retry_if_exception_type(retry_on),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            try:
                return func(*args, **kwargs)
            except retry_on as e:
                logger.warning(
                    "Retryable error in exchange quote",
                    extra={
                        "function": func.__name__,
                        "error_type": type(e).__name__,
                        "error": str(e),
                        "max_attempts": max_attempts,
                    },
                )
                raise

        return wrapper

    return decorator
