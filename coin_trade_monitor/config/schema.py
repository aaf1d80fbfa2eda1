"""
Pydantic configuration schema for Coin Trade Monitor.

This module provides type-safe configuration validation for:
- Cycle timing and the default pair list
- Per-exchange settings (credentials, sandbox, call timeout, mock prices)
- Order decision thresholds
- Storage locations, logging and metrics
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import ConfigurationError
from ..models import CoinExchange


class PairConfig(BaseModel):
    """A coin tracked against a base coin on one exchange."""

    coin: str = Field(..., min_length=1, description="Traded coin symbol, e.g. BTC")
    base_coin: str = Field(..., min_length=1, description="Quote currency symbol, e.g. USD")
    exchange: str = Field(..., min_length=1, description="Exchange name, e.g. mock or binance")
    amount: float = Field(1, gt=0, description="Quantity per order")
    id: Optional[str] = Field(None, description="Stable pair id (derived when omitted)")

    @field_validator("coin", "base_coin")
    @classmethod
    def upper_symbols(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("exchange")
    @classmethod
    def lower_exchange(cls, v: str) -> str:
        return v.strip().lower()

    def to_coin_exchange(self) -> CoinExchange:
        return CoinExchange(
            id=self.id,
            coin=self.coin,
            base_coin=self.base_coin,
            exchange=self.exchange,
            amount=self.amount,
        )


class ExchangeConfig(BaseModel):
    """Settings for one exchange adapter."""

    model_config = ConfigDict(extra="allow")

    api_key: Optional[str] = Field(None, description="API key (orders only)")
    api_secret: Optional[str] = Field(None, description="API secret (orders only)")
    sandbox: bool = Field(False, description="Use the exchange's test environment")
    call_timeout: Optional[float] = Field(
        None, gt=0, description="Seconds before a price or order call is abandoned"
    )
    quote_retries: int = Field(3, ge=1, le=10, description="Attempts per price quote")
    options: Dict[str, Any] = Field(default_factory=dict, description="Extra ccxt options")
    prices: Dict[str, float] = Field(
        default_factory=dict, description="Mock exchange quotes keyed by COIN/BASE"
    )
    reject_orders: bool = Field(False, description="Mock exchange: reject every order")

    @field_validator("api_key", "api_secret")
    @classmethod
    def validate_credentials(cls, v: Optional[str]) -> Optional[str]:
        """Ensure credentials are not unsubstituted placeholders."""
        if v and v.startswith("${") and v.endswith("}"):
            raise ValueError(
                f"Environment variable not substituted: {v}. "
                "Ensure .env file is loaded before config validation."
            )
        return v or None


class PolicyConfig(BaseModel):
    """Percent thresholds of the single-threshold order policy."""

    buy_threshold: float = Field(5.0, gt=0, description="BUY when change <= -buy_threshold")
    sell_threshold: float = Field(5.0, gt=0, description="SELL when change >= sell_threshold")
    alternate: bool = Field(True, description="Never repeat the side of the last order")


class StorageConfig(BaseModel):
    """Where tracked pairs and orders are stored."""

    data_dir: str = "data"
    pairs_file: str = "coin_exchanges.json"
    orders_file: str = "orders.jsonl"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    structured: bool = False
    file: Optional[str] = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Invalid log level '{v}'. Must be one of: {allowed}")
        return v.upper()


class MetricsConfig(BaseModel):
    enabled: bool = True
    console_export: bool = False
    export_interval_ms: int = Field(60000, gt=0)


class TracingConfig(BaseModel):
    enabled: bool = False
    sample_rate: float = Field(0.1, ge=0.0, le=1.0)


class MonitorConfig(BaseModel):
    """Root configuration of the monitor."""

    refresh_interval_ms: int = Field(
        30000, gt=0, description="Delay between the end of one cycle and the next"
    )
    default_pairs: List[PairConfig] = Field(
        default_factory=list, description="Pairs traded when the store holds none"
    )
    exchanges: Dict[str, ExchangeConfig] = Field(default_factory=dict)
    policy: PolicyConfig = Field(default_factory=PolicyConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    tracing: TracingConfig = Field(default_factory=TracingConfig)
    event_buffer_size: int = Field(1000, gt=0)

    @field_validator("exchanges")
    @classmethod
    def lower_exchange_names(cls, v: Dict[str, ExchangeConfig]) -> Dict[str, ExchangeConfig]:
        return {name.lower(): cfg for name, cfg in v.items()}

    def default_coin_exchanges(self) -> List[CoinExchange]:
        return [pair.to_coin_exchange() for pair in self.default_pairs]

    def exchange_settings(self) -> Dict[str, Dict[str, Any]]:
        return {name: cfg.model_dump() for name, cfg in self.exchanges.items()}


# ============================================
# Configuration Loader
# ============================================

def load_config_from_dict(config_dict: Optional[Dict[str, Any]]) -> MonitorConfig:
    """
    Load configuration from dictionary with validation.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    try:
        return MonitorConfig(**(config_dict or {}))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def load_config_from_file(config_path: Union[str, Path]) -> MonitorConfig:
    """
    Load configuration from a YAML file with env var substitution and validation.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    from .loader import load_config

    try:
        config_dict = load_config(str(config_path))
    except (FileNotFoundError, ValueError) as e:
        raise ConfigurationError(str(e)) from e

    return load_config_from_dict(config_dict)
