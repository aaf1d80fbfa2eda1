"""Logging setup for the monitor."""

from .logging_config import CorrelationContext, get_correlation_id, setup_logging

__all__ = ["CorrelationContext", "get_correlation_id", "setup_logging"]
