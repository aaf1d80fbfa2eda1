"""Tests for configuration loading and validation."""

import pytest

from coin_trade_monitor.config import (
    MonitorConfig,
    load_config_from_dict,
    load_config_from_file,
)
from coin_trade_monitor.config.loader import load_config
from coin_trade_monitor.exceptions import ConfigurationError


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        """
refresh_interval_ms: 5000
default_pairs:
  - coin: btc
    base_coin: usd
    exchange: Mock
    amount: 0.5
exchanges:
  MOCK:
    prices:
      BTC/USD: 65000
  binance:
    api_key: ${CTM_TEST_API_KEY}
    api_secret: ${CTM_TEST_API_SECRET:fallback-secret}
policy:
  sell_threshold: 7.5
logging:
  level: debug
"""
    )
    return path


class TestLoader:
    def test_env_substitution(self, config_file, monkeypatch):
        monkeypatch.setenv("CTM_TEST_API_KEY", "key-123")
        monkeypatch.delenv("CTM_TEST_API_SECRET", raising=False)

        raw = load_config(str(config_file))

        assert raw["exchanges"]["binance"]["api_key"] == "key-123"
        assert raw["exchanges"]["binance"]["api_secret"] == "fallback-secret"

    def test_missing_required_env_var(self, config_file, monkeypatch):
        monkeypatch.delenv("CTM_TEST_API_KEY", raising=False)
        with pytest.raises(ValueError, match="CTM_TEST_API_KEY"):
            load_config(str(config_file))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("key: [unclosed")
        with pytest.raises(ValueError):
            load_config(str(path))

    def test_non_mapping_document(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            load_config(str(path))


class TestMonitorConfig:
    """Test suite for MonitorConfig validation."""

    def test_defaults(self):
        config = MonitorConfig()
        assert config.refresh_interval_ms == 30000
        assert config.default_pairs == []
        assert config.policy.buy_threshold == 5.0
        assert config.storage.pairs_file == "coin_exchanges.json"

    def test_from_file(self, config_file, monkeypatch):
        monkeypatch.setenv("CTM_TEST_API_KEY", "key-123")

        config = load_config_from_file(config_file)

        assert config.refresh_interval_ms == 5000
        assert config.policy.sell_threshold == 7.5
        assert config.logging.level == "DEBUG"
        assert set(config.exchanges) == {"mock", "binance"}

        pair = config.default_coin_exchanges()[0]
        assert pair.id == "mock:BTC-USD"
        assert pair.amount == 0.5
        assert pair.needs_initialization()

        settings = config.exchange_settings()
        assert settings["mock"]["prices"] == {"BTC/USD": 65000.0}
        assert settings["binance"]["api_key"] == "key-123"

    def test_file_errors_become_configuration_errors(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config_from_file(tmp_path / "missing.yaml")

    @pytest.mark.parametrize(
        "bad",
        [
            {"refresh_interval_ms": 0},
            {"default_pairs": [{"coin": "BTC", "base_coin": "USD"}]},
            {"default_pairs": [{"coin": "BTC", "base_coin": "USD", "exchange": "mock", "amount": 0}]},
            {"policy": {"buy_threshold": -1}},
            {"logging": {"level": "LOUD"}},
            {"exchanges": {"mock": {"call_timeout": 0}}},
        ],
    )
    def test_invalid_values(self, bad):
        with pytest.raises(ConfigurationError):
            load_config_from_dict(bad)

    def test_unsubstituted_credentials_rejected(self):
        with pytest.raises(ConfigurationError, match="not substituted"):
            load_config_from_dict({"exchanges": {"binance": {"api_key": "${BINANCE_KEY}"}}})

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            load_config_from_dict({"refresh_interval_ms": -5})
