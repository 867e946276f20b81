"""
Unit Tests for the Semantic Search Service

Tests ranking, truncation, data-quality filtering and error propagation.

PATTERNS:
---------
1. Mock embeddings to avoid API calls
2. Hand-written embeddings so expected rankings are obvious
3. Test the pure function and the store-backed service separately
"""

import json

import numpy as np
import pytest
from unittest.mock import MagicMock

from wiki_search.config import SearchConfig
from wiki_search.core.errors import (
    EmbeddingServiceError,
    InputError,
    MissingQueryError,
)
from wiki_search.corpus.item import CorpusItem
from wiki_search.corpus.store import InMemoryDocumentStore, JsonFileDocumentStore
from wiki_search.search.service import (
    SemanticSearchService,
    default_items,
    rank,
    search,
)


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


def make_item(item_id, embedding=None, **fields):
    return CorpusItem(
        id=str(item_id),
        collection="guides",
        fields={"title": f"Guide {item_id}", **fields},
        embedding=embedding,
    )


def fixed_embeddings(vector):
    """Embedding provider that always returns the same query vector."""
    embeddings = MagicMock()
    embeddings.embed.return_value = np.array(vector, dtype=float)
    return embeddings


@pytest.fixture
def scenario_a_corpus():
    return [
        make_item(1, [1.0, 0.0]),
        make_item(2, [0.0, 1.0]),
        make_item(3, [0.9, 0.1]),
    ]


@pytest.fixture
def five_item_corpus():
    """Five items at increasing angles from the x axis, shuffled."""
    angles = {"a": 0.3, "b": 1.2, "c": 0.0, "d": 2.5, "e": 0.7}
    return [
        make_item(name, [np.cos(angle), np.sin(angle)])
        for name, angle in angles.items()
    ]


@pytest.fixture
def ten_item_corpus():
    return [
        make_item(i, [1.0, float(i)])
        for i in range(10)
    ]


# ---------------------------------------------------------------------------
# RANKING
# ---------------------------------------------------------------------------


class TestRanking:
    """Results come back in descending similarity order."""

    def test_scenario_a(self, scenario_a_corpus):
        """Exact match first, near match second, orthogonal item cut by k."""
        results = search("query", scenario_a_corpus, fixed_embeddings([1.0, 0.0]), k=2)

        assert [r.id for r in results] == ["1", "3"]
        assert results[0].similarity == pytest.approx(1.0)
        assert results[1].similarity == pytest.approx(0.994, abs=1e-3)

    def test_strictly_descending(self, five_item_corpus):
        """Five distinct angles should give a strictly descending ranking."""
        results = search("query", five_item_corpus, fixed_embeddings([1.0, 0.0]), k=5)

        assert [r.id for r in results] == ["c", "a", "e", "b", "d"]
        similarities = [r.similarity for r in results]
        assert all(x > y for x, y in zip(similarities, similarities[1:]))

    def test_results_keep_item_fields(self, scenario_a_corpus):
        """Each result should carry the original record plus similarity."""
        results = search("query", scenario_a_corpus, fixed_embeddings([1.0, 0.0]))

        data = results[0].to_dict()
        assert data["id"] == "1"
        assert data["title"] == "Guide 1"
        assert data["similarity"] == pytest.approx(1.0)
        assert "embedding" not in data
        assert results[0].item is scenario_a_corpus[0]

    def test_ties_keep_corpus_order(self):
        """Equal scores should keep the order items appeared in the corpus."""
        corpus = [
            make_item("first", [1.0, 1.0]),
            make_item("best", [1.0, 0.0]),
            make_item("second", [1.0, 1.0]),
            make_item("third", [1.0, 1.0]),
        ]

        results = search("query", corpus, fixed_embeddings([1.0, 0.0]), k=4)

        assert [r.id for r in results] == ["best", "first", "second", "third"]

    def test_idempotent(self, five_item_corpus):
        """Same query over the same snapshot gives the same ranking."""
        embeddings = fixed_embeddings([0.6, 0.8])

        first = search("query", five_item_corpus, embeddings)
        second = search("query", five_item_corpus, embeddings)

        assert [(r.id, r.similarity) for r in first] == [(r.id, r.similarity) for r in second]

    def test_does_not_mutate_corpus(self, five_item_corpus):
        """Corpus order and items should be untouched."""
        snapshot = list(five_item_corpus)
        embeddings_before = [item.embedding.copy() for item in five_item_corpus]

        search("query", five_item_corpus, fixed_embeddings([1.0, 0.0]))

        assert five_item_corpus == snapshot
        for item, before in zip(five_item_corpus, embeddings_before):
            assert np.array_equal(item.embedding, before)

    def test_accepts_generator_corpus(self, scenario_a_corpus):
        """Any iterable should work as a corpus."""
        results = search("query", (item for item in scenario_a_corpus), fixed_embeddings([1.0, 0.0]))

        assert [r.id for r in results] == ["1", "3", "2"]


# ---------------------------------------------------------------------------
# TRUNCATION
# ---------------------------------------------------------------------------


class TestTruncation:
    """k bounds the result count without padding."""

    def test_truncates_to_k(self, ten_item_corpus):
        """k=2 on ten items returns the two best."""
        results = search("query", ten_item_corpus, fixed_embeddings([1.0, 0.0]), k=2)

        assert [r.id for r in results] == ["0", "1"]

    def test_default_k_is_five(self, ten_item_corpus):
        """Without k, five results come back."""
        results = search("query", ten_item_corpus, fixed_embeddings([1.0, 0.0]))

        assert len(results) == 5

    def test_k_larger_than_corpus(self, scenario_a_corpus):
        """k beyond the corpus size returns every scorable item, ordered."""
        results = search("query", scenario_a_corpus, fixed_embeddings([1.0, 0.0]), k=10)

        assert [r.id for r in results] == ["1", "3", "2"]

    @pytest.mark.parametrize("k", [0, -1, 2.5, "3", True])
    def test_invalid_k(self, scenario_a_corpus, k):
        """Non-positive or non-integer k is a caller error."""
        with pytest.raises(InputError):
            search("query", scenario_a_corpus, fixed_embeddings([1.0, 0.0]), k=k)


# ---------------------------------------------------------------------------
# DATA-QUALITY FILTERING
# ---------------------------------------------------------------------------


class TestFiltering:
    """Unusable items are dropped, never fatal."""

    def test_items_without_embedding_excluded(self):
        """Items lacking an embedding never appear in results."""
        corpus = [
            make_item("no-vector"),
            make_item("vector", [1.0, 0.0]),
            make_item("also-no-vector"),
        ]

        for query_vector in ([1.0, 0.0], [0.0, 1.0], [-1.0, 0.0]):
            results = search("query", corpus, fixed_embeddings(query_vector), k=10)
            assert [r.id for r in results] == ["vector"]

    def test_all_items_without_embedding(self):
        """No scorable items gives an empty result, not an error."""
        corpus = [make_item(i) for i in range(3)]

        results = search("query", corpus, fixed_embeddings([1.0, 0.0]))

        assert results == []

    def test_empty_corpus(self):
        """Empty corpus gives an empty result."""
        assert search("query", [], fixed_embeddings([1.0, 0.0])) == []

    def test_wrong_dimensionality_excluded(self):
        """Items embedded with a different model are skipped."""
        corpus = [
            make_item("old-model", [1.0, 0.0, 0.0]),
            make_item("current", [0.0, 1.0]),
        ]

        results = search("query", corpus, fixed_embeddings([1.0, 0.0]), k=10)

        assert [r.id for r in results] == ["current"]

    def test_zero_vector_item_excluded(self):
        """A degenerate item is dropped without failing the request."""
        corpus = [
            make_item("zero", [0.0, 0.0]),
            make_item("good", [1.0, 1.0]),
        ]

        results = search("query", corpus, fixed_embeddings([1.0, 0.0]), k=10)

        assert [r.id for r in results] == ["good"]
        assert not any(np.isnan(r.similarity) for r in results)

    def test_non_finite_item_excluded(self):
        """Items with NaN or inf in their embedding are skipped."""
        corpus = [
            make_item("nan", [float("nan"), 1.0]),
            make_item("inf", [float("inf"), 1.0]),
            make_item("good", [1.0, 0.0]),
        ]

        results = search("query", corpus, fixed_embeddings([1.0, 0.0]), k=10)

        assert [r.id for r in results] == ["good"]

    def test_zero_query_vector_gives_empty_result(self, scenario_a_corpus):
        """Every item is degenerate against a zero query."""
        results = rank(np.zeros(2), scenario_a_corpus, k=5)

        assert results == []


# ---------------------------------------------------------------------------
# QUERY AND EMBEDDING ERRORS
# ---------------------------------------------------------------------------


class TestQueryErrors:
    """Query-level failures abort the request."""

    @pytest.mark.parametrize("query", ["", "   ", "\n\t", None])
    def test_empty_query(self, scenario_a_corpus, query):
        """Empty or whitespace query raises MissingQueryError."""
        embeddings = fixed_embeddings([1.0, 0.0])

        with pytest.raises(MissingQueryError):
            search(query, scenario_a_corpus, embeddings)

        embeddings.embed.assert_not_called()

    def test_missing_query_is_input_error(self, scenario_a_corpus):
        """MissingQueryError belongs to the InputError family."""
        with pytest.raises(InputError) as exc_info:
            search("", scenario_a_corpus, fixed_embeddings([1.0, 0.0]))

        assert exc_info.value.code == "missing_query"

    def test_embedding_service_error_propagates(self, scenario_a_corpus):
        """Provider failures surface unchanged and are not retried."""
        embeddings = MagicMock()
        embeddings.embed.side_effect = EmbeddingServiceError("timeout")

        with pytest.raises(EmbeddingServiceError):
            search("query", scenario_a_corpus, embeddings)

        assert embeddings.embed.call_count == 1

    def test_unexpected_provider_error_is_wrapped(self, scenario_a_corpus):
        """Arbitrary provider exceptions become EmbeddingServiceError."""
        embeddings = MagicMock()
        embeddings.embed.side_effect = ConnectionError("network down")

        with pytest.raises(EmbeddingServiceError) as exc_info:
            search("query", scenario_a_corpus, embeddings)

        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_non_finite_query_vector(self, scenario_a_corpus):
        """A NaN query vector is an embedding service failure."""
        with pytest.raises(EmbeddingServiceError):
            search("query", scenario_a_corpus, fixed_embeddings([float("nan"), 1.0]))


# ---------------------------------------------------------------------------
# DEFAULT LIST
# ---------------------------------------------------------------------------


class TestDefaultItems:
    """Unranked fallback list."""

    def test_returns_prefix_in_order(self, ten_item_corpus):
        """First items in store order, no ranking."""
        items = default_items(ten_item_corpus, limit=5)

        assert [item.id for item in items] == ["0", "1", "2", "3", "4"]

    def test_includes_items_without_embedding(self):
        """Embedding is irrelevant for the fallback list."""
        corpus = [make_item("a"), make_item("b", [1.0, 0.0])]

        assert [item.id for item in default_items(corpus)] == ["a", "b"]

    def test_short_corpus(self):
        """Fewer items than the limit returns them all."""
        assert len(default_items([make_item("a")], limit=5)) == 1


# ---------------------------------------------------------------------------
# STORE-BACKED SERVICE
# ---------------------------------------------------------------------------


class TestSemanticSearchService:
    """Service fetches a fresh snapshot per call and delegates ranking."""

    @pytest.fixture
    def store(self):
        return InMemoryDocumentStore({
            "guides": [
                {"id": "wireframes", "title": "Wireframes", "embedding": [1.0, 0.0]},
                {"id": "gdpr", "title": "GDPR", "embedding": [0.0, 1.0]},
                {"id": "draft", "title": "Draft without vector"},
            ],
            "projects": [
                {"id": "portal", "title": "Portal", "embedding": [0.0, 1.0]},
            ],
        })

    @pytest.fixture
    def config(self):
        return SearchConfig(top_k=5, collection="guides", popular_limit=2, store_backend="memory")

    def test_search_default_collection(self, store, config):
        """Searches the configured collection."""
        service = SemanticSearchService(store, fixed_embeddings([1.0, 0.0]), config)

        results = service.search("wireframe")

        assert [r.id for r in results] == ["wireframes", "gdpr"]

    def test_search_other_collection(self, store, config):
        """Collection can be chosen per call."""
        service = SemanticSearchService(store, fixed_embeddings([1.0, 0.0]), config)

        results = service.search("portal", collection="projects")

        assert [r.id for r in results] == ["portal"]

    def test_search_uses_configured_k(self, store):
        """top_k from config is the default k."""
        config = SearchConfig(top_k=1, store_backend="memory")
        service = SemanticSearchService(store, fixed_embeddings([1.0, 0.0]), config)

        assert len(service.search("anything")) == 1

    def test_search_sees_new_items(self, store, config):
        """Nothing is cached between calls."""
        service = SemanticSearchService(store, fixed_embeddings([1.0, 0.0]), config)
        service.search("first")

        store.add("guides", {"id": "new", "title": "New", "embedding": [1.0, 0.01]})
        results = service.search("second")

        assert "new" in [r.id for r in results]

    def test_unreadable_stored_embedding_is_skipped(self, tmp_path, config):
        """One corrupt record does not take the whole search down."""
        path = tmp_path / "wiki.json"
        path.write_text(json.dumps({"guides": [
            {"id": "bad", "title": "Bad", "embedding": "not-a-vector"},
            {"id": "good", "title": "Good", "embedding": [1.0, 0.0]},
        ]}), encoding="utf-8")
        service = SemanticSearchService(JsonFileDocumentStore(path), fixed_embeddings([1.0, 0.0]), config)

        assert [r.id for r in service.search("good")] == ["good"]

    def test_empty_query_skips_store(self, config):
        """Input validation happens before any I/O."""
        store = MagicMock()
        service = SemanticSearchService(store, fixed_embeddings([1.0, 0.0]), config)

        with pytest.raises(MissingQueryError):
            service.search("  ")

        store.fetch_all.assert_not_called()

    def test_popular(self, store, config):
        """popular() returns the first configured number of items."""
        service = SemanticSearchService(store, fixed_embeddings([1.0, 0.0]), config)

        assert [item.id for item in service.popular()] == ["wireframes", "gdpr"]
        assert [item.id for item in service.popular(limit=3)] == ["wireframes", "gdpr", "draft"]

    def test_embed_text(self, store, config):
        """embed_text returns the provider's vector."""
        service = SemanticSearchService(store, fixed_embeddings([0.5, 0.5]), config)

        assert service.embed_text("Title\nDescription\nContent").tolist() == [0.5, 0.5]

    def test_embed_text_missing(self, store, config):
        """Empty text is rejected with its own error code."""
        service = SemanticSearchService(store, fixed_embeddings([0.5, 0.5]), config)

        with pytest.raises(InputError) as exc_info:
            service.embed_text("")

        assert exc_info.value.code == "missing_text"


class TestExtremeMagnitudes:
    """Finite vectors rank by angle whatever their scale."""

    def test_huge_and_tiny_embeddings(self):
        corpus = [
            make_item("huge-off", [1e200, 1e200]),
            make_item("tiny-on", [1e-200, 0.0]),
        ]

        results = rank(np.array([1.0, 0.0]), corpus, k=2)

        assert [r.id for r in results] == ["tiny-on", "huge-off"]
        assert results[0].similarity == pytest.approx(1.0)
        assert results[1].similarity == pytest.approx(np.sqrt(0.5))
