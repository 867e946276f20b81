"""
Error taxonomy for semantic search.

Every error carries a short machine-readable ``code`` so the HTTP layer
can translate it into a response payload without leaking tracebacks.

Propagation:
- InputError / EmbeddingServiceError abort the whole request
- DegenerateVectorError is absorbed per item by the search service
"""

from __future__ import annotations


class SearchError(Exception):
    """Base class for all search failures."""

    code = "search_error"

    def __init__(self, message: str = "", code: str | None = None):
        if code is not None:
            self.code = code
        super().__init__(message or self.code)
        self.message = message or self.code


class InputError(SearchError):
    """Malformed caller input. Surfaced immediately, never retried."""

    code = "invalid_request"


class MissingQueryError(InputError):
    """Query is absent, empty, or whitespace only."""

    code = "missing_query"


class DimensionMismatchError(InputError):
    """Two vectors of different lengths were compared."""

    code = "dimension_mismatch"

    def __init__(self, left: int, right: int):
        super().__init__(f"Vector dimensions differ: {left} != {right}")
        self.left = left
        self.right = right


class DegenerateVectorError(SearchError):
    """An empty, all-zero or non-finite vector was scored."""

    code = "degenerate_vector"


class EmbeddingServiceError(SearchError):
    """The embedding capability failed or timed out."""

    code = "embedding_failed"


class ServiceUnavailableError(SearchError):
    """The store or embedding provider could not be set up from configuration."""

    code = "service_unavailable"
