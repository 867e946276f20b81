"""
Search tracing.

One span per search request. The span starts with the query length and
k, ends with corpus size and result count, and on failure carries the
SearchError code. Query text is never recorded.

get_tracer() returns an OTelSearchTracer when tracing is enabled
and init_tracing() has installed a provider, otherwise a NoOpTracer.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator, Protocol

from wiki_search.core.errors import SearchError
from wiki_search.observability.attributes import (
    SEARCH_CORPUS_SIZE,
    SEARCH_ERROR_CODE,
    SEARCH_RESULT_COUNT,
    SEARCH_SPAN_NAME,
    search_attributes,
)

if TYPE_CHECKING:
    from wiki_search.config import SearchConfig


class SearchSpanProtocol(Protocol):
    def record_result(self, corpus_size: int, result_count: int) -> None:
        ...

    def record_error(self, error: SearchError) -> None:
        ...


class SearchTracerProtocol(Protocol):
    def start_search(self, query: str, k: int) -> Any:
        """Context manager yielding a SearchSpanProtocol."""
        ...


# ---------------------------------------------------------------------------
# NOOP (tracing disabled)
# ---------------------------------------------------------------------------


class NoOpSpan:
    def record_result(self, corpus_size: int, result_count: int) -> None:
        pass

    def record_error(self, error: SearchError) -> None:
        pass


class NoOpTracer:
    @contextmanager
    def start_search(self, query: str, k: int) -> Iterator[NoOpSpan]:
        yield NoOpSpan()


# ---------------------------------------------------------------------------
# OPENTELEMETRY
# ---------------------------------------------------------------------------


class OTelSearchSpan:
    """Writes search outcomes onto an OTel span."""

    def __init__(self, span: Any):
        self._span = span

    def record_result(self, corpus_size: int, result_count: int) -> None:
        from opentelemetry.trace import StatusCode

        self._span.set_attribute(SEARCH_CORPUS_SIZE, corpus_size)
        self._span.set_attribute(SEARCH_RESULT_COUNT, result_count)
        self._span.set_status(StatusCode.OK)

    def record_error(self, error: SearchError) -> None:
        from opentelemetry.trace import StatusCode

        self._span.record_exception(error)
        self._span.set_attribute(SEARCH_ERROR_CODE, error.code)
        self._span.set_status(StatusCode.ERROR, error.code)


class OTelSearchTracer:
    def __init__(self, tracer: Any):
        self._tracer = tracer

    @contextmanager
    def start_search(self, query: str, k: int) -> Iterator[OTelSearchSpan]:
        """
        Span around one search.

        SearchErrors are recorded with their code and re-raised; anything
        else is left to OTel's default exception recording.
        """
        with self._tracer.start_as_current_span(
            SEARCH_SPAN_NAME,
            attributes=search_attributes(query, k),
        ) as span:
            search_span = OTelSearchSpan(span)
            try:
                yield search_span
            except SearchError as e:
                search_span.record_error(e)
                raise


# ---------------------------------------------------------------------------
# FACTORY
# ---------------------------------------------------------------------------


_tracer: SearchTracerProtocol | None = None


def get_tracer(config: SearchConfig | None = None) -> SearchTracerProtocol:
    """Get the global search tracer (decided once, until reset_tracer)."""
    global _tracer
    if _tracer is not None:
        return _tracer

    if config is None:
        from wiki_search.config import get_config
        config = get_config()

    _tracer = NoOpTracer()
    if not config.tracing_enabled:
        return _tracer

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.trace import TracerProvider
    except ImportError:
        return _tracer

    # Spans are only exported once init_tracing() has installed an SDK provider
    if isinstance(trace.get_tracer_provider(), TracerProvider):
        _tracer = OTelSearchTracer(trace.get_tracer("wiki-search"))
    return _tracer


def reset_tracer() -> None:
    """Reset tracer (useful for testing)."""
    global _tracer
    _tracer = None
