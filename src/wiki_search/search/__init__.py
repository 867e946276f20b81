"""
Search module - cosine similarity ranking over embedded corpus items.

This module provides:
- cosine_similarity(): the similarity scorer
- search() / rank(): pure ranking over a corpus snapshot
- default_items(): unranked fallback list
- SemanticSearchService: store-backed facade used by the API and CLI
"""

from wiki_search.search.similarity import cosine_similarity
from wiki_search.search.service import (
    DEFAULT_TOP_K,
    SemanticSearchService,
    default_items,
    embed_query,
    rank,
    search,
)

__all__ = [
    "cosine_similarity",
    "DEFAULT_TOP_K",
    "SemanticSearchService",
    "default_items",
    "embed_query",
    "rank",
    "search",
]
