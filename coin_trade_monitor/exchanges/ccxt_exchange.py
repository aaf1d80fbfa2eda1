"""Live exchange backend over the ccxt unified API."""

import logging
from typing import Any, Dict, Optional

import ccxt

from ..exceptions import (
    ConfigurationError,
    OrderRejectedError,
    OrderSubmissionError,
    PriceUnavailableError,
)
from ..models import CoinExchange, OrderType
from .base_exchange import BaseExchange, OrderResult
from .retry_handler import quote_retry

logger = logging.getLogger(__name__)


class CcxtExchange(BaseExchange):
    """
    Exchange adapter for any market supported by ccxt (binance, kraken, ...).

    Quotes use the ticker's last traded price. Orders are spot market orders
    sized by the tracked pair's ``amount``.
    """

    def __init__(self, exchange_id: str, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the ccxt client.

        Args:
            exchange_id: ccxt exchange id, e.g. "binance"
            config: Optional settings:
                - api_key / api_secret: account credentials (orders only)
                - sandbox: use the exchange's test environment
                - options: extra ccxt options merged into the client config
                - quote_retries: attempts for price quotes (default 3)
        """
        super().__init__(config)
        exchange_id = exchange_id.lower()
        if exchange_id not in ccxt.exchanges:
            raise ConfigurationError(f"ccxt does not support exchange '{exchange_id}'")

        self.name = exchange_id
        client_config = {
            "enableRateLimit": True,
            "options": {"defaultType": "spot", **(self.config.get("options") or {})},
        }
        if self.config.get("api_key"):
            client_config["apiKey"] = self.config["api_key"]
            client_config["secret"] = self.config.get("api_secret")

        self.client = getattr(ccxt, exchange_id)(client_config)
        if self.config.get("sandbox"):
            self.client.set_sandbox_mode(True)

        attempts = int(self.config.get("quote_retries", 3))
        self._fetch_last_price = quote_retry(
            max_attempts=attempts, retry_on=(ccxt.NetworkError,)
        )(self._fetch_last_price)

        logger.info(
            "CcxtExchange initialized: %s (sandbox=%s, credentials=%s)",
            exchange_id,
            bool(self.config.get("sandbox")),
            "yes" if self.config.get("api_key") else "no",
        )

    def _fetch_last_price(self, symbol: str) -> Optional[float]:
        ticker = self.client.fetch_ticker(symbol)
        return ticker.get("last") or ticker.get("close")

    def get_coin_price(self, coin: str, base_coin: str) -> float:
        symbol = f"{coin.upper()}/{base_coin.upper()}"
        try:
            price = self._fetch_last_price(symbol)
        except ccxt.BaseError as e:
            raise PriceUnavailableError(
                f"{self.name} cannot quote {symbol}: {type(e).__name__}: {e}"
            ) from e

        if price is None:
            raise PriceUnavailableError(f"{self.name} returned an empty ticker for {symbol}")
        return float(price)

    def _create_market_order(self, coin_exchange: CoinExchange, order_type: OrderType) -> OrderResult:
        if not self.config.get("api_key"):
            raise OrderRejectedError(
                f"No credentials configured for {self.name}; refusing to place orders"
            )

        side = order_type.value.lower()
        try:
            order = self.client.create_order(
                symbol=coin_exchange.symbol,
                type="market",
                side=side,
                amount=coin_exchange.amount,
            )
        except ccxt.NetworkError as e:
            raise OrderSubmissionError(
                f"{self.name} {side} {coin_exchange.symbol} not delivered: {e}"
            ) from e
        except ccxt.ExchangeError as e:
            raise OrderRejectedError(
                f"{self.name} rejected {side} {coin_exchange.symbol}: {e}"
            ) from e

        return {
            "order_id": order.get("id"),
            "status": order.get("status"),
            "price": order.get("average") or order.get("price"),
            "amount": order.get("filled") or order.get("amount"),
        }

    def buy_coin(self, coin_exchange: CoinExchange) -> OrderResult:
        return self._create_market_order(coin_exchange, OrderType.BUY)

    def sell_coin(self, coin_exchange: CoinExchange) -> OrderResult:
        return self._create_market_order(coin_exchange, OrderType.SELL)

    def close(self) -> None:
        close = getattr(self.client, "close", None)
        if callable(close):
            close()
