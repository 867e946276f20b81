"""
Core protocols defining contracts for the search system.

The search core only ever talks to two collaborators, both behind a
Protocol so tests can swap in doubles:

- EmbeddingProvider: text -> vector (OpenAIEmbeddings, MockEmbeddings)
- DocumentStore: collection-scoped CRUD (InMemory, JsonFile, Pg)

Scored results are defined here too, since both the service and the
HTTP layer depend on them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Protocol, runtime_checkable

import numpy as np

if TYPE_CHECKING:
    from wiki_search.corpus.item import CorpusItem


# ---------------------------------------------------------------------------
# EMBEDDING PROVIDER PROTOCOL
# ---------------------------------------------------------------------------

@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    Contract for embedding generation.

    Implementations raise EmbeddingServiceError when the backend fails.
    """

    def embed(self, text: str) -> np.ndarray:
        """Generate embedding for a single text."""
        ...

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts."""
        ...


# ---------------------------------------------------------------------------
# DOCUMENT STORE PROTOCOL
# ---------------------------------------------------------------------------

@runtime_checkable
class DocumentStore(Protocol):
    """
    Contract for collection-scoped document storage.

    Implementations:
    - InMemoryDocumentStore (testing/development)
    - JsonFileDocumentStore (local CLI use)
    - PgDocumentStore (production with PostgreSQL)
    """

    def fetch_all(self, collection: str) -> list[CorpusItem]:
        """Return every item in the collection, in insertion order."""
        ...

    def add(self, collection: str, record: Mapping[str, Any]) -> str:
        """Insert a record and return its id."""
        ...

    def update(self, collection: str, item_id: str, record: Mapping[str, Any]) -> None:
        """Replace the fields of an existing record."""
        ...

    def find_by_field(self, collection: str, field: str, value: Any) -> list[CorpusItem]:
        """Return items whose field equals value."""
        ...


# ---------------------------------------------------------------------------
# SEARCH RESULTS
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class ScoredItem:
    """A corpus item with its similarity to one query. Never persisted."""
    item: CorpusItem
    similarity: float

    @property
    def id(self) -> str:
        return self.item.id

    def to_dict(self, include_embedding: bool = False) -> dict[str, Any]:
        """Stored record plus the computed similarity."""
        data = self.item.to_record(include_embedding=include_embedding)
        data["similarity"] = self.similarity
        return data
