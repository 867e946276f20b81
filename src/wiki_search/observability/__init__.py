"""
Observability Module - OpenTelemetry tracing for search requests.

USAGE:
------
# At application startup:
from wiki_search.observability import init_tracing

init_tracing()  # No-op unless WIKI_SEARCH_TRACING=true

# In code that needs tracing:
from wiki_search.observability import get_tracer

with get_tracer().start_search(query, k) as span:
    ...
    span.record_result(corpus_size, result_count)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wiki_search.observability.tracer import (
    SearchTracerProtocol,
    SearchSpanProtocol,
    NoOpTracer,
    NoOpSpan,
    get_tracer,
    reset_tracer,
)

if TYPE_CHECKING:
    from wiki_search.config import SearchConfig

logger = logging.getLogger(__name__)

_tracing_initialized = False


def init_tracing(config: SearchConfig | None = None) -> bool:
    """
    Install an OpenTelemetry tracer provider.

    Spans go to the OTLP endpoint when one is configured, otherwise to
    the console exporter.

    Returns:
        True if tracing was initialized, False if disabled or unavailable
    """
    global _tracing_initialized
    if _tracing_initialized:
        return True

    if config is None:
        from wiki_search.config import get_config
        config = get_config()

    if not config.tracing_enabled:
        logger.debug("Tracing disabled")
        return False

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

        if config.collector_endpoint:
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
            exporter = OTLPSpanExporter(endpoint=config.collector_endpoint)
            logger.info(f"Exporting spans to: {config.collector_endpoint}")
        else:
            exporter = ConsoleSpanExporter()

        provider = TracerProvider(resource=Resource.create({"service.name": "wiki-search"}))
        provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)

    except ImportError as e:
        logger.warning(f"OpenTelemetry not installed, tracing disabled: {e}")
        return False

    reset_tracer()
    _tracing_initialized = True
    return True


def shutdown_tracing() -> None:
    """Flush and shut down the tracer provider."""
    global _tracing_initialized

    if not _tracing_initialized:
        return

    from opentelemetry import trace
    provider = trace.get_tracer_provider()
    if hasattr(provider, "shutdown"):
        provider.shutdown()

    reset_tracer()
    _tracing_initialized = False


__all__ = [
    "init_tracing",
    "shutdown_tracing",
    "SearchTracerProtocol",
    "SearchSpanProtocol",
    "NoOpTracer",
    "NoOpSpan",
    "get_tracer",
    "reset_tracer",
]
