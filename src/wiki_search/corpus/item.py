"""
Corpus item model.

Single responsibility: turn the untyped records a document store returns
into typed items, tagged by whether they carry an embedding.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

import numpy as np

logger = logging.getLogger(__name__)

RESERVED_FIELDS = ("id", "embedding")


def as_vector(values: Any) -> np.ndarray:
    """Copy values into a read-only 1-D float64 array."""
    vector = np.array(values, dtype=np.float64).reshape(-1)
    vector.flags.writeable = False
    return vector


@dataclass(frozen=True, eq=False)
class CorpusItem:
    """
    A guide, project or any other record stored in a collection.

    ``fields`` holds every stored field except ``id`` and ``embedding``.
    Items without an embedding are valid; search simply skips them.
    """
    id: str
    collection: str
    fields: Mapping[str, Any] = field(default_factory=dict)
    embedding: np.ndarray | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))
        if self.embedding is not None:
            object.__setattr__(self, "embedding", as_vector(self.embedding))

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        collection: str,
        item_id: str | None = None,
    ) -> "CorpusItem":
        """Build an item from a raw store record."""
        resolved_id = item_id if item_id is not None else record.get("id")
        if resolved_id is None:
            raise ValueError(f"Record in {collection!r} has no id")

        embedding = record.get("embedding")
        if embedding is not None:
            try:
                embedding = as_vector(embedding)
            except (TypeError, ValueError) as e:
                # Unreadable vectors leave the item unembedded; search skips it
                logger.debug(f"Ignoring unreadable embedding on {collection}/{resolved_id}: {e}")
                embedding = None

        return cls(
            id=str(resolved_id),
            collection=collection,
            fields={k: v for k, v in record.items() if k not in RESERVED_FIELDS},
            embedding=embedding,
        )

    @property
    def has_embedding(self) -> bool:
        return self.embedding is not None

    @property
    def dimensions(self) -> int | None:
        return None if self.embedding is None else int(self.embedding.shape[0])

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def to_record(self, include_embedding: bool = True) -> dict[str, Any]:
        """Convert back to a plain dict (JSON-serializable)."""
        record = dict(self.fields)
        record["id"] = self.id
        if include_embedding and self.embedding is not None:
            record["embedding"] = self.embedding.tolist()
        return record
