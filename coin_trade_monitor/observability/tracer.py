"""OpenTelemetry tracing initialization and setup."""

import logging
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBasedTraceIdRatio

logger = logging.getLogger(__name__)

_tracer_initialized: bool = False


def init_tracer(config: dict) -> None:
    """
    Initialize OpenTelemetry tracing.

    Args:
        config: Configuration dict with keys:
            - tracing.enabled: bool (default False)
            - tracing.sample_rate: float 0.0-1.0 (default 0.1)
            - service.name: str (default coin_trade_monitor)
    """
    global _tracer_initialized

    if _tracer_initialized:
        logger.warning("Tracer already initialized; skipping re-initialization")
        return

    tracing_config = config.get("tracing", {})
    if not tracing_config.get("enabled", False):
        logger.info("Tracing disabled; using noop tracer provider")
        trace.set_tracer_provider(TracerProvider())
        _tracer_initialized = True
        return

    sample_rate = tracing_config.get("sample_rate", 0.1)
    resource = Resource.create(
        {"service.name": config.get("service", {}).get("name", "coin_trade_monitor")}
    )

    # Parent-based sampler: child spans follow the cycle span's decision
    provider = TracerProvider(resource=resource, sampler=ParentBasedTraceIdRatio(sample_rate))
    provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer_initialized = True
    logger.info(f"OpenTelemetry tracing initialized (sample_rate={sample_rate})")


def get_tracer(name: str, version: Optional[str] = None) -> trace.Tracer:
    """
    Get a tracer instance for the given module name.

    Args:
        name: Module name (e.g., __name__)
        version: Optional version string for the instrumentation library

    Returns:
        OpenTelemetry Tracer instance
    """
    return trace.get_tracer(name, instrumenting_library_version=version)
