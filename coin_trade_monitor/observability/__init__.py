"""Observability module for tracing and metrics."""

from .metrics import (
    create_counters,
    create_histograms,
    get_meter,
    init_metrics,
    shutdown_metrics,
)
from .tracer import get_tracer, init_tracer

__all__ = [
    "init_tracer",
    "get_tracer",
    "init_metrics",
    "shutdown_metrics",
    "get_meter",
    "create_counters",
    "create_histograms",
]
