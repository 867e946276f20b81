"""
Span attribute keys for search operations.

Query text is never recorded, only its length.
"""

from __future__ import annotations

from typing import Any

SEARCH_SPAN_NAME = "wiki_search.search"

SEARCH_QUERY_LENGTH = "wiki_search.query_length"
SEARCH_TOP_K = "wiki_search.top_k"
SEARCH_CORPUS_SIZE = "wiki_search.corpus_size"
SEARCH_RESULT_COUNT = "wiki_search.result_count"
SEARCH_ERROR_CODE = "wiki_search.error_code"


def search_attributes(query: str, k: int) -> dict[str, Any]:
    """Attributes set when a search span starts."""
    return {
        SEARCH_QUERY_LENGTH: len(query),
        SEARCH_TOP_K: k,
    }
