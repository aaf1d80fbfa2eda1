"""Tests for the CoinTradeMonitor application object."""

import pytest

from coin_trade_monitor import CoinTradeMonitor, events
from coin_trade_monitor.exceptions import ConfigurationError
from coin_trade_monitor.models import CoinExchange, Order, OrderType
from coin_trade_monitor.persistence import OrderStore


@pytest.fixture
def config_dict(tmp_path):
    return {
        "refresh_interval_ms": 1,
        "default_pairs": [
            {"coin": "BTC", "base_coin": "USD", "exchange": "mock"},
            {"coin": "ETH", "base_coin": "USD", "exchange": "mock", "amount": 2},
        ],
        "exchanges": {"mock": {"prices": {"BTC/USD": 100, "ETH/USD": 10}}},
        "storage": {"data_dir": str(tmp_path / "data")},
        "metrics": {"enabled": False},
    }


class TestCoinTradeMonitor:
    """Test suite for CoinTradeMonitor wiring."""

    def test_invalid_config(self):
        with pytest.raises(ConfigurationError):
            CoinTradeMonitor({"refresh_interval_ms": 0})

    @pytest.mark.asyncio
    async def test_runs_default_pairs_and_persists_them(self, config_dict):
        app = CoinTradeMonitor(config_dict, max_cycles=2, log_events=False)

        await app.run()

        assert app.monitor.cycle_count == 2
        stored = {p.id: p for p in app.coin_exchange_store.get_all()}
        assert set(stored) == {"mock:BTC-USD", "mock:ETH-USD"}
        assert stored["mock:ETH-USD"].amount == 2
        assert stored["mock:BTC-USD"].price_start == 100.0
        assert stored["mock:BTC-USD"].updated_at is not None

        names = [name for name, _, _ in app.event_buffer.drain()]
        assert names[0] == events.MONITOR_START
        assert names.count(events.MONITOR_CYCLE) == 2

    @pytest.mark.asyncio
    async def test_stored_pairs_take_precedence(self, config_dict):
        first = CoinTradeMonitor(config_dict, max_cycles=1, log_events=False)
        await first.run()

        config_dict["default_pairs"] = [{"coin": "SOL", "base_coin": "USD", "exchange": "mock"}]
        second = CoinTradeMonitor(config_dict, max_cycles=1, log_events=False)
        await second.run()

        assert sorted(p.id for p in second.monitor.coins_to_trade) == [
            "mock:BTC-USD",
            "mock:ETH-USD",
        ]

    def test_policy_seeded_from_order_history(self, config_dict):
        pair = CoinExchange(coin="BTC", base_coin="USD", exchange="mock", amount=1, price_exchange=100)
        OrderStore(config_dict["storage"]).append(Order.for_pair(pair, "old-1", OrderType.BUY))

        app = CoinTradeMonitor(config_dict, log_events=False)

        assert app.policy.last_order(pair.id) is OrderType.BUY
        assert app.policy.decide(pair.id, -50.0) is OrderType.NONE

    def test_custom_policy_is_used(self, config_dict):
        class Never:
            def decide(self, pair_id, percent_change):
                return OrderType.NONE

            def record_order(self, pair_id, order_type):
                pass

        policy = Never()
        app = CoinTradeMonitor(config_dict, policy=policy)
        assert app.order_service.policy is policy
