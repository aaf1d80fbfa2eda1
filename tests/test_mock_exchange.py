"""Tests for MockExchange and the async wrappers of BaseExchange."""

import asyncio
import time

import pytest

from coin_trade_monitor.exceptions import (
    OrderError,
    OrderRejectedError,
    OrderSubmissionError,
    PriceUnavailableError,
)
from coin_trade_monitor.exchanges import BaseExchange, MockExchange
from coin_trade_monitor.models import CoinExchange


class TestMockExchange:
    """Test suite for MockExchange."""

    def test_quotes_configured_prices(self, mock_exchange):
        assert mock_exchange.get_coin_price("BTC", "USD") == 100.0
        assert mock_exchange.get_coin_price("eth", "usd") == 10.0

    def test_dash_symbols_in_config(self):
        exchange = MockExchange({"prices": {"sol-usdt": 20}})
        assert exchange.get_coin_price("SOL", "USDT") == 20.0

    def test_malformed_symbol_rejected(self):
        with pytest.raises(ValueError):
            MockExchange({"prices": {"BTCUSD": 1}})

    def test_unknown_pair_is_unavailable(self, mock_exchange):
        with pytest.raises(PriceUnavailableError):
            mock_exchange.get_coin_price("DOGE", "USD")

    def test_fail_price_injection(self, mock_exchange):
        mock_exchange.fail_price("BTC", "USD")
        with pytest.raises(PriceUnavailableError):
            mock_exchange.get_coin_price("BTC", "USD")

    def test_set_price(self, mock_exchange):
        mock_exchange.set_price("BTC", "USD", 123.0)
        assert mock_exchange.get_coin_price("BTC", "USD") == 123.0

    def test_orders_fill_with_sequential_ids(self, mock_exchange, make_pair):
        pair = make_pair(amount=2.0)
        first = mock_exchange.buy_coin(pair)
        second = mock_exchange.sell_coin(pair)

        assert first["order_id"] == "mock-1"
        assert second["order_id"] == "mock-2"
        assert first["status"] == "FILLED"
        assert first["amount"] == 2.0
        assert [o["order_type"] for o in mock_exchange.orders] == ["BUY", "SELL"]

    def test_reject_orders(self, make_pair):
        exchange = MockExchange({"prices": {"BTC/USD": 1}, "reject_orders": True})
        with pytest.raises(OrderRejectedError):
            exchange.buy_coin(make_pair())
        assert exchange.orders == []


class SlowExchange(BaseExchange):
    """Exchange whose calls take longer than any sensible timeout."""

    name = "slow"

    def get_coin_price(self, coin, base_coin):
        time.sleep(0.5)
        return 1.0

    async def buy_coin(self, coin_exchange):
        await asyncio.sleep(0.5)
        return {"order_id": "late"}

    def sell_coin(self, coin_exchange):
        return {}


class BrokenExchange(BaseExchange):
    name = "broken"

    def get_coin_price(self, coin, base_coin):
        raise ConnectionError("socket closed")

    def buy_coin(self, coin_exchange):
        raise ConnectionError("socket closed")

    def sell_coin(self, coin_exchange):
        return None


class NoneQuoteExchange(BaseExchange):
    name = "none"

    async def get_coin_price(self, coin, base_coin):
        return None

    def buy_coin(self, coin_exchange):
        return {"order_id": 7}

    def sell_coin(self, coin_exchange):
        return {"order_id": ""}


class TestBaseExchangeAsyncWrappers:
    @pytest.fixture
    def pair(self):
        return CoinExchange(coin="BTC", base_coin="USD", exchange="slow", amount=1)

    @pytest.mark.asyncio
    async def test_sync_price_runs_off_loop(self, mock_exchange):
        price = await mock_exchange.aget_coin_price("BTC", "USD")
        assert price == 100.0

    @pytest.mark.asyncio
    async def test_price_timeout_maps_to_unavailable(self):
        exchange = SlowExchange({"call_timeout": 0.05})
        with pytest.raises(PriceUnavailableError, match="within"):
            await exchange.aget_coin_price("BTC", "USD")

    @pytest.mark.asyncio
    async def test_order_timeout_maps_to_submission_error(self, pair):
        exchange = SlowExchange({"call_timeout": 0.05})
        with pytest.raises(OrderSubmissionError, match="timed out"):
            await exchange.abuy_coin(pair)

    @pytest.mark.asyncio
    async def test_no_timeout_by_default(self, pair):
        exchange = SlowExchange()
        assert exchange.call_timeout is None
        result = await exchange.abuy_coin(pair)
        assert result["order_id"] == "late"

    @pytest.mark.asyncio
    async def test_unexpected_errors_are_translated(self, pair):
        exchange = BrokenExchange()
        with pytest.raises(PriceUnavailableError, match="ConnectionError"):
            await exchange.aget_coin_price("BTC", "USD")
        with pytest.raises(OrderSubmissionError, match="ConnectionError"):
            await exchange.abuy_coin(pair)

    @pytest.mark.asyncio
    async def test_missing_order_id_is_rejection(self, pair):
        with pytest.raises(OrderRejectedError):
            await BrokenExchange().asell_coin(pair)
        with pytest.raises(OrderRejectedError):
            await NoneQuoteExchange().asell_coin(pair)

    @pytest.mark.asyncio
    async def test_missing_price_is_unavailable(self):
        with pytest.raises(PriceUnavailableError):
            await NoneQuoteExchange().aget_coin_price("BTC", "USD")

    @pytest.mark.asyncio
    async def test_exchange_errors_pass_through(self, mock_exchange, make_pair):
        mock_exchange.reject_orders = True
        with pytest.raises(OrderRejectedError, match="mock rejected"):
            await mock_exchange.abuy_coin(make_pair())

    @pytest.mark.asyncio
    async def test_unquotable_order_is_submission_error(self, make_pair):
        exchange = MockExchange({"prices": {}})
        with pytest.raises(OrderSubmissionError, match="no quote") as excinfo:
            await exchange.abuy_coin(make_pair())
        assert isinstance(excinfo.value, OrderError)
        assert isinstance(excinfo.value.__cause__, PriceUnavailableError)
        assert exchange.orders == []
