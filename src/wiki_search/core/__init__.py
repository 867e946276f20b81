"""
Core module - shared protocols, result types and errors.

USAGE:
------
from wiki_search.core import DocumentStore, EmbeddingProvider, ScoredItem
"""

from wiki_search.core.errors import (
    SearchError,
    InputError,
    MissingQueryError,
    DimensionMismatchError,
    DegenerateVectorError,
    EmbeddingServiceError,
    ServiceUnavailableError,
)
from wiki_search.core.protocols import (
    # Protocols
    EmbeddingProvider,
    DocumentStore,
    # Data classes
    ScoredItem,
)

__all__ = [
    # Errors
    "SearchError",
    "InputError",
    "MissingQueryError",
    "DimensionMismatchError",
    "DegenerateVectorError",
    "EmbeddingServiceError",
    "ServiceUnavailableError",
    # Protocols
    "EmbeddingProvider",
    "DocumentStore",
    # Data classes
    "ScoredItem",
]
