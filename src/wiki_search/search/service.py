"""
Semantic search service.

Ranking runs as a pure function over an explicitly passed corpus snapshot:

    query -> embed() -> score every scorable item -> sort -> truncate

SemanticSearchService wraps that function with a document store, so the
HTTP layer and CLI get "search this collection" without the ranking code
ever touching storage.

Tie-break: equal similarities keep corpus iteration order (list.sort is
stable), which makes rankings reproducible for a fixed snapshot.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

import numpy as np

from wiki_search.core.errors import (
    DegenerateVectorError,
    EmbeddingServiceError,
    InputError,
    MissingQueryError,
)
from wiki_search.core.protocols import ScoredItem
from wiki_search.observability import get_tracer
from wiki_search.search.similarity import cosine_similarity

if TYPE_CHECKING:
    from wiki_search.config import SearchConfig
    from wiki_search.core.protocols import DocumentStore, EmbeddingProvider
    from wiki_search.corpus.item import CorpusItem

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5


def _validate_query(query: str | None) -> str:
    if query is None or not isinstance(query, str) or not query.strip():
        raise MissingQueryError("Missing query")
    return query


def _validate_k(k: int) -> int:
    # bool is an int subclass; True would silently mean k=1
    if isinstance(k, bool) or not isinstance(k, int):
        raise InputError(f"k must be an integer, got {type(k).__name__}")
    if k < 1:
        raise InputError(f"k must be positive, got {k}")
    return k


def embed_query(query: str, embeddings: EmbeddingProvider) -> np.ndarray:
    """Embed a query, normalising every collaborator failure to EmbeddingServiceError."""
    try:
        vector = embeddings.embed(query)
    except EmbeddingServiceError:
        raise
    except Exception as e:
        logger.error(f"Embedding request failed: {e}")
        raise EmbeddingServiceError(f"Embedding request failed: {e}") from e

    vector = np.asarray(vector, dtype=np.float64).reshape(-1)
    if vector.size == 0 or not np.all(np.isfinite(vector)):
        raise EmbeddingServiceError("Embedding service returned an unusable vector")
    return vector


def _is_scorable(item: CorpusItem, dimensions: int) -> bool:
    """Data-quality filter. Exclusions are logged, never raised."""
    if item.embedding is None:
        logger.debug(f"Skipping {item.collection}/{item.id}: no embedding")
        return False
    if item.embedding.shape[0] != dimensions:
        logger.debug(
            f"Skipping {item.collection}/{item.id}: embedding has "
            f"{item.embedding.shape[0]} dimensions, query has {dimensions}"
        )
        return False
    if not np.all(np.isfinite(item.embedding)):
        logger.debug(f"Skipping {item.collection}/{item.id}: non-finite embedding")
        return False
    return True


def rank(
    query_vector: np.ndarray,
    corpus: Iterable[CorpusItem],
    k: int = DEFAULT_TOP_K,
) -> list[ScoredItem]:
    """
    Rank a corpus snapshot against an already-embedded query.

    Items without a usable embedding are skipped, and so are items whose
    vector is degenerate. The corpus is never mutated.
    """
    k = _validate_k(k)
    query_vector = np.asarray(query_vector, dtype=np.float64).reshape(-1)
    dimensions = query_vector.shape[0]

    if not np.any(query_vector):
        logger.warning("Query embedding has zero magnitude; no item can be scored")

    scored: list[ScoredItem] = []
    for item in corpus:
        if not _is_scorable(item, dimensions):
            continue
        try:
            similarity = cosine_similarity(query_vector, item.embedding)
        except DegenerateVectorError:
            logger.debug(f"Skipping {item.collection}/{item.id}: degenerate vector")
            continue
        scored.append(ScoredItem(item=item, similarity=similarity))

    scored.sort(key=lambda s: s.similarity, reverse=True)
    return scored[:k]


def search(
    query: str,
    corpus: Iterable[CorpusItem],
    embeddings: EmbeddingProvider,
    k: int = DEFAULT_TOP_K,
) -> list[ScoredItem]:
    """
    Return the k corpus items most similar to the query.

    Args:
        query: Free-text query, must contain non-whitespace characters
        corpus: Read-only snapshot of the items to rank
        embeddings: Embedding provider used for the query vector
        k: Maximum number of results (all scorable items if fewer)

    Raises:
        MissingQueryError: empty or whitespace-only query
        InputError: k is not a positive integer
        EmbeddingServiceError: the embedding provider failed
    """
    query = _validate_query(query)
    k = _validate_k(k)

    with get_tracer().start_search(query, k) as span:
        query_vector = embed_query(query, embeddings)
        corpus = list(corpus)
        results = rank(query_vector, corpus, k)
        span.record_result(len(corpus), len(results))

    logger.debug(f"Ranked {len(results)} of {len(corpus)} items for query of length {len(query)}")
    return results


def default_items(corpus: Iterable[CorpusItem], limit: int = 5) -> list[CorpusItem]:
    """First `limit` items in store order. No similarity is computed."""
    limit = _validate_k(limit)
    items: list[CorpusItem] = []
    for item in corpus:
        if len(items) >= limit:
            break
        items.append(item)
    return items


class SemanticSearchService:
    """
    Collection-level search over a document store.

    Dependencies are INJECTED, not created internally.
    Every call fetches a fresh snapshot; nothing is cached.
    """

    def __init__(
        self,
        store: DocumentStore,
        embeddings: EmbeddingProvider,
        config: SearchConfig | None = None,
    ):
        if config is None:
            from wiki_search.config import get_config
            config = get_config()

        self.config = config
        self._store = store
        self._embeddings = embeddings

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def embeddings(self) -> EmbeddingProvider:
        return self._embeddings

    def search(
        self,
        query: str,
        collection: str | None = None,
        k: int | None = None,
    ) -> list[ScoredItem]:
        """Rank the current contents of a collection against a query."""
        # Reject bad queries before the store is read
        _validate_query(query)
        collection = collection or self.config.collection
        corpus = self._store.fetch_all(collection)
        return search(query, corpus, self._embeddings, k=k if k is not None else self.config.top_k)

    def popular(self, collection: str | None = None, limit: int | None = None) -> list[CorpusItem]:
        """Unranked fallback list shown when no query is present."""
        collection = collection or self.config.collection
        corpus = self._store.fetch_all(collection)
        return default_items(corpus, limit if limit is not None else self.config.popular_limit)

    def embed_text(self, text: str) -> np.ndarray:
        """Embed arbitrary content text (used when authoring guides)."""
        if text is None or not isinstance(text, str) or not text.strip():
            raise InputError("Missing text", code="missing_text")
        return embed_query(text, self._embeddings)
