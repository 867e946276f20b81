"""
Document store implementations.

Pattern: Protocol → Production impl → Test double → Factory

This module contains:
1. InMemoryDocumentStore - dict-backed store (testing/development)
2. JsonFileDocumentStore - single JSON file (local CLI use)
3. PgDocumentStore - PostgreSQL with pgvector (production)
4. get_document_store() - Factory function

Stores only persist and return records. Search filtering and ranking
happen in memory in wiki_search.search, never in the store.
"""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

import numpy as np

from wiki_search.corpus.item import CorpusItem

if TYPE_CHECKING:
    from wiki_search.config import SearchConfig
    from wiki_search.core.protocols import DocumentStore

# Optional: Only import psycopg if available (for local dev without postgres)
try:
    import psycopg
    from psycopg.types.json import Jsonb
    from pgvector.psycopg import register_vector

    PGVECTOR_AVAILABLE = True
except ImportError:
    PGVECTOR_AVAILABLE = False

logger = logging.getLogger(__name__)


def _split_record(record: Mapping[str, Any]) -> tuple[str | None, dict[str, Any], Any]:
    """Separate id and embedding from the plain fields of a record."""
    fields = {k: v for k, v in record.items() if k not in ("id", "embedding")}
    return record.get("id"), fields, record.get("embedding")


def _new_id() -> str:
    return uuid.uuid4().hex


def _embedding_to_list(embedding: Any) -> list[float] | None:
    if embedding is None:
        return None
    return np.asarray(embedding, dtype=np.float64).reshape(-1).tolist()


# ---------------------------------------------------------------------------
# IN-MEMORY STORE (Testing/Development)
# ---------------------------------------------------------------------------


class InMemoryDocumentStore:
    """
    In-memory document store for development/testing.

    Collections keep insertion order, which is the order fetch_all returns.
    """

    def __init__(self, initial: Mapping[str, list[Mapping[str, Any]]] | None = None):
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        for collection, records in (initial or {}).items():
            for record in records:
                self.add(collection, record)

    def fetch_all(self, collection: str) -> list[CorpusItem]:
        records = self._collections.get(collection, {})
        return [
            CorpusItem.from_record(record, collection=collection, item_id=item_id)
            for item_id, record in records.items()
        ]

    def add(self, collection: str, record: Mapping[str, Any]) -> str:
        item_id, fields, embedding = _split_record(record)
        item_id = str(item_id) if item_id is not None else _new_id()
        self._collections.setdefault(collection, {})[item_id] = {
            **fields,
            "embedding": _embedding_to_list(embedding),
        }
        return item_id

    def update(self, collection: str, item_id: str, record: Mapping[str, Any]) -> None:
        records = self._collections.get(collection, {})
        if item_id not in records:
            raise KeyError(f"{collection}/{item_id} does not exist")
        _, fields, embedding = _split_record(record)
        records[item_id] = {**fields, "embedding": _embedding_to_list(embedding)}

    def find_by_field(self, collection: str, field: str, value: Any) -> list[CorpusItem]:
        return [item for item in self.fetch_all(collection) if item.get(field) == value]

    def collections(self) -> list[str]:
        return list(self._collections)


# ---------------------------------------------------------------------------
# JSON FILE STORE (Local use)
# ---------------------------------------------------------------------------


class JsonFileDocumentStore:
    """
    Document store persisted as one JSON file: {collection: [records]}.

    The whole file is read and rewritten on every write. Fine for a local
    wiki with a few hundred guides, not for concurrent writers.
    """

    def __init__(self, file_path: Path | str):
        self._path = Path(file_path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, list[dict[str, Any]]]:
        if not self._path.exists():
            return {}
        with open(self._path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self._path} must contain a JSON object of collections")
        return data

    def _save(self, data: dict[str, list[dict[str, Any]]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        tmp_path.replace(self._path)

    def fetch_all(self, collection: str) -> list[CorpusItem]:
        return [
            CorpusItem.from_record(record, collection=collection)
            for record in self._load().get(collection, [])
        ]

    def add(self, collection: str, record: Mapping[str, Any]) -> str:
        item_id, fields, embedding = _split_record(record)
        item_id = str(item_id) if item_id is not None else _new_id()
        stored = {**fields, "id": item_id, "embedding": _embedding_to_list(embedding)}

        data = self._load()
        records = data.setdefault(collection, [])
        for i, existing in enumerate(records):
            if existing.get("id") == item_id:
                records[i] = stored
                break
        else:
            records.append(stored)
        self._save(data)
        return item_id

    def update(self, collection: str, item_id: str, record: Mapping[str, Any]) -> None:
        _, fields, embedding = _split_record(record)
        data = self._load()
        records = data.get(collection, [])
        for i, existing in enumerate(records):
            if existing.get("id") == item_id:
                records[i] = {**fields, "id": item_id, "embedding": _embedding_to_list(embedding)}
                self._save(data)
                return
        raise KeyError(f"{collection}/{item_id} does not exist")

    def find_by_field(self, collection: str, field: str, value: Any) -> list[CorpusItem]:
        return [item for item in self.fetch_all(collection) if item.get(field) == value]


# ---------------------------------------------------------------------------
# PGVECTOR STORE (Production)
# ---------------------------------------------------------------------------


class PgDocumentStore:
    """
    PostgreSQL document store using JSONB for fields and pgvector for embeddings.

    The embedding column has no fixed dimension: items embedded with an
    older model stay readable and are simply skipped at search time.
    """

    def __init__(self, connection_string: str, table_name: str = "wiki_documents"):
        self.connection_string = connection_string
        self.table_name = table_name
        self._conn = None

    def connect(self) -> None:
        """Establish database connection."""
        if not PGVECTOR_AVAILABLE:
            raise ImportError(
                "pgvector not available. Install with: pip install pgvector psycopg[binary]"
            )

        self._conn = psycopg.connect(self.connection_string, autocommit=True)
        self._conn.execute("CREATE EXTENSION IF NOT EXISTS vector")
        register_vector(self._conn)

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def _connection(self):
        if not self._conn:
            self.connect()
        return self._conn

    def create_schema(self) -> None:
        """Create the documents table and its ordering index."""
        conn = self._connection()
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self.table_name} (
                position BIGSERIAL,
                collection TEXT NOT NULL,
                id TEXT NOT NULL,
                data JSONB NOT NULL,
                embedding vector,
                PRIMARY KEY (collection, id)
            )
            """
        )
        conn.execute(
            f"""
            CREATE INDEX IF NOT EXISTS {self.table_name}_position_idx
            ON {self.table_name} (collection, position)
            """
        )

    @staticmethod
    def _to_vector(embedding: Any) -> np.ndarray | None:
        if embedding is None:
            return None
        return np.asarray(embedding, dtype=np.float32).reshape(-1)

    def _rows_to_items(self, collection: str, rows: list[tuple]) -> list[CorpusItem]:
        return [
            CorpusItem(id=row[0], collection=collection, fields=row[1] or {}, embedding=row[2])
            for row in rows
        ]

    def fetch_all(self, collection: str) -> list[CorpusItem]:
        rows = self._connection().execute(
            f"""
            SELECT id, data, embedding
            FROM {self.table_name}
            WHERE collection = %s
            ORDER BY position
            """,
            (collection,),
        ).fetchall()
        return self._rows_to_items(collection, rows)

    def add(self, collection: str, record: Mapping[str, Any]) -> str:
        item_id, fields, embedding = _split_record(record)
        item_id = str(item_id) if item_id is not None else _new_id()
        self._connection().execute(
            f"""
            INSERT INTO {self.table_name} (collection, id, data, embedding)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (collection, id) DO UPDATE SET
                data = EXCLUDED.data,
                embedding = EXCLUDED.embedding
            """,
            (collection, item_id, Jsonb(fields), self._to_vector(embedding)),
        )
        return item_id

    def update(self, collection: str, item_id: str, record: Mapping[str, Any]) -> None:
        _, fields, embedding = _split_record(record)
        cursor = self._connection().execute(
            f"""
            UPDATE {self.table_name}
            SET data = %s, embedding = %s
            WHERE collection = %s AND id = %s
            """,
            (Jsonb(fields), self._to_vector(embedding), collection, item_id),
        )
        if cursor.rowcount == 0:
            raise KeyError(f"{collection}/{item_id} does not exist")

    def find_by_field(self, collection: str, field: str, value: Any) -> list[CorpusItem]:
        rows = self._connection().execute(
            f"""
            SELECT id, data, embedding
            FROM {self.table_name}
            WHERE collection = %s AND data ->> %s = %s
            ORDER BY position
            """,
            (collection, field, str(value)),
        ).fetchall()
        return self._rows_to_items(collection, rows)


# ---------------------------------------------------------------------------
# FACTORY FUNCTION
# ---------------------------------------------------------------------------


def get_document_store(
    backend: str | None = None,
    config: SearchConfig | None = None,
) -> DocumentStore:
    """
    Factory function to get the configured document store.

    Args:
        backend: memory | file | postgres (defaults to WIKI_SEARCH_STORE)
        config: Search configuration (global config if not provided)

    Returns:
        DocumentStore implementation
    """
    if config is None:
        from wiki_search.config import get_config
        config = get_config()

    backend = (backend or config.store_backend).lower()

    if backend == "memory":
        return InMemoryDocumentStore()
    if backend == "file":
        return JsonFileDocumentStore(config.data_file)
    if backend == "postgres":
        store = PgDocumentStore(config.database_url)
        store.create_schema()
        return store
    raise ValueError(f"Unknown store backend: {backend!r}")
