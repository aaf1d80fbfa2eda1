"""Configuration module for Coin Trade Monitor."""

from coin_trade_monitor.config.schema import (
    ExchangeConfig,
    LoggingConfig,
    MetricsConfig,
    MonitorConfig,
    PairConfig,
    PolicyConfig,
    StorageConfig,
    TracingConfig,
    load_config_from_dict,
    load_config_from_file,
)

__all__ = [
    "PairConfig",
    "ExchangeConfig",
    "PolicyConfig",
    "StorageConfig",
    "LoggingConfig",
    "MetricsConfig",
    "TracingConfig",
    "MonitorConfig",
    "load_config_from_dict",
    "load_config_from_file",
]
