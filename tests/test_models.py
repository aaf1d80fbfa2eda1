"""Tests for pair and order models."""

import dataclasses

import pytest

from coin_trade_monitor.models import CoinExchange, Order, OrderType, make_pair_id


class TestOrderType:
    def test_is_valid_only_for_submittable_types(self):
        assert OrderType.is_valid(OrderType.BUY)
        assert OrderType.is_valid("SELL")
        assert not OrderType.is_valid(OrderType.NONE)
        assert not OrderType.is_valid("HOLD")
        assert not OrderType.is_valid(None)

    def test_string_comparison(self):
        assert OrderType.BUY == "BUY"


class TestCoinExchange:
    """Test suite for CoinExchange."""

    def test_symbols_are_normalized_and_id_derived(self):
        pair = CoinExchange(coin="btc", base_coin="usd", exchange="Mock")
        assert pair.coin == "BTC"
        assert pair.base_coin == "USD"
        assert pair.id == "mock:BTC-USD"
        assert pair.symbol == "BTC/USD"

    def test_explicit_id_is_kept(self):
        pair = CoinExchange(coin="BTC", base_coin="USD", exchange="mock", id="pair-1")
        assert pair.id == "pair-1"

    def test_make_pair_id(self):
        assert make_pair_id("Binance", "eth", "usdt") == "binance:ETH-USDT"

    def test_new_pair_needs_initialization(self):
        pair = CoinExchange(coin="BTC", base_coin="USD", exchange="mock")
        assert pair.needs_initialization()

    def test_zero_fields_count_as_unset(self):
        pair = CoinExchange(
            coin="BTC", base_coin="USD", exchange="mock",
            amount=1, price_exchange=100, price_order=0, price_start=100, price_change=0.0,
        )
        assert pair.needs_initialization()

    def test_initialize_prices_fills_every_absent_field(self):
        pair = CoinExchange(coin="BTC", base_coin="USD", exchange="mock")
        pair.initialize_prices(250.0)

        assert pair.price_order == 250.0
        assert pair.price_start == 250.0
        assert pair.price_exchange == 250.0
        assert pair.amount == 1
        assert pair.price_change == 0.0
        assert not pair.needs_initialization()

    def test_initialize_prices_keeps_present_fields(self):
        pair = CoinExchange(
            coin="BTC", base_coin="USD", exchange="mock", amount=0.5, price_start=90.0
        )
        pair.initialize_prices(100.0)

        assert pair.price_start == 90.0
        assert pair.amount == 0.5
        assert pair.price_order == 100.0

    def test_price_start_is_write_once(self):
        pair = CoinExchange(coin="BTC", base_coin="USD", exchange="mock")
        pair.set_price_start(10.0)
        with pytest.raises(ValueError):
            pair.set_price_start(20.0)
        assert pair.price_start == 10.0

    def test_dict_round_trip(self, make_pair):
        pair = make_pair()
        pair.updated_at = "2024-01-01T00:00:00+00:00"
        assert CoinExchange.from_dict(pair.to_dict()) == pair


class TestOrder:
    def test_for_pair_copies_pair_state(self, make_pair):
        pair = make_pair(price_order=120.0, amount=2.0)
        order = Order.for_pair(pair, 12345, "SELL")

        assert order.coin_exchange_id == pair.id
        assert order.order_type is OrderType.SELL
        assert order.exchange_order_id == "12345"
        assert order.price == 120.0
        assert order.amount == 2.0
        assert order.id
        assert order.created_at

    def test_orders_are_immutable(self, make_pair):
        order = Order.for_pair(make_pair(), "x", OrderType.BUY)
        with pytest.raises(dataclasses.FrozenInstanceError):
            order.price = 1.0

    def test_ids_are_unique(self, make_pair):
        pair = make_pair()
        assert Order.for_pair(pair, "a", "BUY").id != Order.for_pair(pair, "b", "BUY").id

    def test_from_dict(self, make_pair):
        order = Order.for_pair(make_pair(), "x", OrderType.BUY)
        restored = Order.from_dict(order.to_dict())
        assert restored == order
