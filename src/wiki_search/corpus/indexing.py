"""
Indexing - attach embeddings to content records as they are written.

Guides and projects are embedded from "title\\ndescription\\ncontent",
the same text the admin create/edit pages and the seed data use.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from wiki_search.core.protocols import DocumentStore, EmbeddingProvider

logger = logging.getLogger(__name__)


@dataclass
class SeedReport:
    """Outcome of seeding one collection."""
    collection: str
    added: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.added) + len(self.skipped)


def embedding_text(record: Mapping[str, Any]) -> str:
    """Text a record is embedded from."""
    return "\n".join(
        str(record.get(name) or "") for name in ("title", "description", "content")
    )


def index_record(
    store: DocumentStore,
    embeddings: EmbeddingProvider,
    collection: str,
    record: Mapping[str, Any],
    item_id: str | None = None,
) -> str:
    """
    Embed a record and write it to the store.

    Creates a new record, or replaces item_id when given. Embedding
    failures propagate and nothing is written.

    Returns:
        The stored record id
    """
    embedding = embeddings.embed(embedding_text(record))
    data = {**record, "embedding": embedding}

    if item_id is None:
        item_id = store.add(collection, data)
        logger.info(f"Indexed new {collection} record {item_id}")
    else:
        store.update(collection, item_id, data)
        logger.info(f"Re-indexed {collection} record {item_id}")
    return item_id


def seed_collection(
    store: DocumentStore,
    embeddings: EmbeddingProvider,
    collection: str,
    records: list[Mapping[str, Any]],
) -> SeedReport:
    """
    Insert seed records that are not already present (matched by slug).

    New records are embedded in a single batch before anything is written.
    """
    report = SeedReport(collection=collection)
    pending: list[Mapping[str, Any]] = []
    seen: set[str] = set()

    for record in records:
        slug = record.get("slug")
        if slug and (slug in seen or store.find_by_field(collection, "slug", slug)):
            logger.warning(f"Skipping existing {collection} record: {slug}")
            report.skipped.append(slug)
            continue
        if slug:
            seen.add(slug)
        pending.append(record)

    vectors = embeddings.embed_batch([embedding_text(r) for r in pending])
    if len(vectors) != len(pending):
        raise ValueError(
            f"Embedding provider returned {len(vectors)} vectors for {len(pending)} texts"
        )

    for record, vector in zip(pending, vectors):
        store.add(collection, {**record, "embedding": vector})
        label = record.get("slug") or record.get("title") or "<untitled>"
        report.added.append(label)
        logger.info(f"Added {collection} record with embedding: {label}")

    return report
