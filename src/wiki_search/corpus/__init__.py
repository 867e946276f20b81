"""
Corpus module - content records and where they live.

This module provides:
- CorpusItem: typed record, tagged by presence of an embedding
- InMemoryDocumentStore / JsonFileDocumentStore / PgDocumentStore
- get_document_store(): Factory function
- index_record() / seed_collection(): write records with embeddings

ARCHITECTURE:
-------------
1. Protocol defines the contract (in core.protocols)
2. Multiple implementations (InMemory, JsonFile, Pg)
3. Factory function for instantiation
"""

from wiki_search.corpus.item import CorpusItem

from wiki_search.corpus.store import (
    InMemoryDocumentStore,
    JsonFileDocumentStore,
    PgDocumentStore,
    get_document_store,
)

from wiki_search.corpus.indexing import (
    SeedReport,
    embedding_text,
    index_record,
    seed_collection,
)

__all__ = [
    # Model
    "CorpusItem",
    # Implementations
    "InMemoryDocumentStore",
    "JsonFileDocumentStore",
    "PgDocumentStore",
    # Factory
    "get_document_store",
    # Indexing
    "SeedReport",
    "embedding_text",
    "index_record",
    "seed_collection",
]
