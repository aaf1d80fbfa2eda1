"""Tests for the ctm command-line interface."""

import pytest
import yaml
from click.testing import CliRunner

from coin_trade_monitor.cli.commands import history, market, monitor
from coin_trade_monitor.cli.main import cli
from coin_trade_monitor.models import CoinExchange, Order, OrderType
from coin_trade_monitor.persistence import OrderStore


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep rich tables on one line per row."""
    for module in (history, market, monitor):
        monkeypatch.setattr(module.console, "width", 200)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "refresh_interval_ms": 1,
                "default_pairs": [{"coin": "BTC", "base_coin": "USD", "exchange": "mock"}],
                "exchanges": {"mock": {"prices": {"BTC/USD": 65000}}},
                "storage": {"data_dir": str(tmp_path / "data")},
                "metrics": {"enabled": False},
            }
        )
    )
    return path


class TestCli:
    """Test suite for the ctm commands."""

    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("run", "prices", "pairs", "orders", "exchanges"):
            assert command in result.output

    def test_exchanges(self, runner, config_path):
        result = runner.invoke(cli, ["-c", str(config_path), "exchanges"])
        assert result.exit_code == 0
        assert "mock" in result.output

    def test_bad_config_file(self, runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("refresh_interval_ms: -1\n")

        result = runner.invoke(cli, ["-c", str(path), "pairs"])

        assert result.exit_code != 0
        assert "Configuration error" in result.output

    def test_prices(self, runner, config_path):
        result = runner.invoke(cli, ["-c", str(config_path), "prices"])
        assert result.exit_code == 0, result.output
        assert "BTC/USD" in result.output
        assert "65,000" in result.output

    def test_run_then_pairs(self, runner, config_path):
        result = runner.invoke(cli, ["-c", str(config_path), "run", "--cycles", "2"])
        assert result.exit_code == 0, result.output
        assert "Last cycle #2" in result.output
        assert "monitor:cycle" in result.output

        result = runner.invoke(cli, ["-c", str(config_path), "pairs"])
        assert result.exit_code == 0
        assert "mock:BTC-USD" in result.output

    def test_pairs_empty(self, runner, config_path):
        result = runner.invoke(cli, ["-c", str(config_path), "pairs"])
        assert result.exit_code == 0
        assert "No tracked pairs" in result.output

    def test_orders(self, runner, config_path, tmp_path):
        result = runner.invoke(cli, ["-c", str(config_path), "orders"])
        assert "No orders recorded" in result.output

        store = OrderStore({"data_dir": str(tmp_path / "data")})
        pair = CoinExchange(coin="BTC", base_coin="USD", exchange="mock", amount=1, price_exchange=70000)
        store.append(Order.for_pair(pair, "mock-7", OrderType.SELL))
        store.append(Order.for_pair(pair, "mock-8", OrderType.BUY))

        result = runner.invoke(cli, ["-c", str(config_path), "orders", "--limit", "1"])

        assert result.exit_code == 0
        assert "mock-8" in result.output
        assert "mock-7" not in result.output
