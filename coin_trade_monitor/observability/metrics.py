"""Metrics collection for OpenTelemetry."""

import logging
from typing import Optional

from opentelemetry import metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    PeriodicExportingMetricReader,
)
from opentelemetry.sdk.resources import Resource

logger = logging.getLogger(__name__)

_meter_provider: Optional[MeterProvider] = None
_meter_initialized: bool = False


def init_metrics(config: dict) -> None:
    """
    Initialize OpenTelemetry metrics.

    Args:
        config: Configuration dict with keys:
            - metrics.enabled: bool (default True)
            - metrics.console_export: bool (default False)
            - metrics.export_interval_ms: int (default 60000)
            - service.name: str
    """
    global _meter_provider, _meter_initialized

    if _meter_initialized:
        logger.warning("Metrics already initialized; skipping re-initialization")
        return

    metrics_config = config.get("metrics", {})
    enabled = metrics_config.get("enabled", True)

    if not enabled:
        logger.info("Metrics disabled; using noop meter provider")
        metrics.set_meter_provider(MeterProvider())
        _meter_initialized = True
        return

    service_name = config.get("service", {}).get("name", "coin_trade_monitor")
    resource = Resource.create({"service.name": service_name})

    readers = []
    if metrics_config.get("console_export", False):
        readers.append(
            PeriodicExportingMetricReader(
                ConsoleMetricExporter(),
                export_interval_millis=metrics_config.get("export_interval_ms", 60000),
            )
        )

    try:
        provider = MeterProvider(resource=resource, metric_readers=readers)
        metrics.set_meter_provider(provider)
        _meter_provider = provider
        _meter_initialized = True
        logger.info(f"Metrics initialized ({len(readers)} reader(s))")
    except Exception as e:
        logger.error(f"Failed to initialize metrics: {e}; falling back to noop", exc_info=True)
        metrics.set_meter_provider(MeterProvider())
        _meter_initialized = True


def shutdown_metrics() -> None:
    global _meter_provider
    if _meter_provider is not None:
        _meter_provider.shutdown()
        _meter_provider = None


def get_meter(name: str, version: Optional[str] = None) -> metrics.Meter:
    """
    Get a meter instance for the given module name.

    Args:
        name: Module name (e.g., __name__)
        version: Optional version string for the instrumentation library

    Returns:
        OpenTelemetry Meter instance
    """
    return metrics.get_meter(name, version=version)


def create_counters(meter: metrics.Meter) -> dict:
    """
    Create standard counters for the monitor.

    Args:
        meter: Meter instance

    Returns:
        Dict of counter names to counter objects
    """
    return {
        "ctm_cycles_total": meter.create_counter(
            name="ctm_cycles_total",
            description="Total monitor cycles completed",
            unit="1",
        ),
        "ctm_price_checks_total": meter.create_counter(
            name="ctm_price_checks_total",
            description="Total price quotes requested from exchanges",
            unit="1",
        ),
        "ctm_orders_submitted_total": meter.create_counter(
            name="ctm_orders_submitted_total",
            description="Total orders accepted by exchanges",
            unit="1",
        ),
        "ctm_order_failures_total": meter.create_counter(
            name="ctm_order_failures_total",
            description="Total orders rejected or not delivered",
            unit="1",
        ),
        "ctm_pair_failures_total": meter.create_counter(
            name="ctm_pair_failures_total",
            description="Total per-pair evaluations that ended in an error",
            unit="1",
        ),
    }


def create_histograms(meter: metrics.Meter) -> dict:
    """
    Create standard histograms for the monitor.

    Args:
        meter: Meter instance

    Returns:
        Dict of histogram names to histogram objects
    """
    return {
        "ctm_exchange_latency_seconds": meter.create_histogram(
            name="ctm_exchange_latency_seconds",
            description="Latency of exchange calls",
            unit="s",
        ),
        "ctm_cycle_duration_seconds": meter.create_histogram(
            name="ctm_cycle_duration_seconds",
            description="Wall time of a full monitor cycle",
            unit="s",
        ),
    }
