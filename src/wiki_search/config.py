"""
Search configuration.

Loads settings from environment variables. The CLI loads a .env file
first (python-dotenv), so the same variables work in both places.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUE_VALUES = ("true", "1", "yes")
STORE_BACKENDS = ("memory", "file", "postgres")

# Version string
VERSION = "0.1.0"


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in _TRUE_VALUES


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass
class SearchConfig:
    """Configuration for semantic search.

    Environment Variables:
        WIKI_SEARCH_TOP_K: Ranked results returned per query (default: 5)
        WIKI_SEARCH_COLLECTION: Collection searched by default (default: guides)
        WIKI_SEARCH_POPULAR_LIMIT: Size of the unranked fallback list (default: 5)
        WIKI_SEARCH_STORE: Document store backend, memory|file|postgres (default: file)
        WIKI_SEARCH_DATA_FILE: JSON file used by the file backend
        DATABASE_URL: Connection string used by the postgres backend
        EMBEDDING_MODEL: OpenAI embedding model (default: text-embedding-ada-002)
        EMBEDDING_TIMEOUT_SEC: Timeout for one embedding request (default: 30)
        USE_MOCK_EMBEDDINGS: Use deterministic hash embeddings (default: false)
        WIKI_SEARCH_TRACING: Emit OpenTelemetry spans (default: false)
        OTEL_EXPORTER_OTLP_ENDPOINT: Remote span collector (optional)
        LOG_LEVEL: Root level for the wiki_search logger (default: INFO)
    """

    top_k: int = 5
    collection: str = "guides"
    popular_limit: int = 5
    store_backend: str = "file"
    data_file: str = "wiki_data.json"
    database_url: str = "postgresql://localhost/wiki"
    embedding_model: str = "text-embedding-ada-002"
    embedding_timeout_sec: int = 30
    use_mock_embeddings: bool = False
    tracing_enabled: bool = False
    collector_endpoint: str | None = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"Unknown store backend {self.store_backend!r}, "
                f"expected one of {', '.join(STORE_BACKENDS)}"
            )

    @classmethod
    def from_env(cls) -> "SearchConfig":
        """Load config from environment variables."""
        return cls(
            top_k=_env_int("WIKI_SEARCH_TOP_K", 5),
            collection=os.environ.get("WIKI_SEARCH_COLLECTION", "guides"),
            popular_limit=_env_int("WIKI_SEARCH_POPULAR_LIMIT", 5),
            store_backend=os.environ.get("WIKI_SEARCH_STORE", "file").lower(),
            data_file=os.environ.get("WIKI_SEARCH_DATA_FILE", "wiki_data.json"),
            database_url=os.environ.get("DATABASE_URL", "postgresql://localhost/wiki"),
            embedding_model=os.environ.get("EMBEDDING_MODEL", "text-embedding-ada-002"),
            embedding_timeout_sec=_env_int("EMBEDDING_TIMEOUT_SEC", 30),
            use_mock_embeddings=_env_bool("USE_MOCK_EMBEDDINGS"),
            tracing_enabled=_env_bool("WIKI_SEARCH_TRACING"),
            collector_endpoint=os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT") or None,
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )


# Global config singleton
_config: SearchConfig | None = None


def get_config() -> SearchConfig:
    """Get the global search config (lazy-loaded from env)."""
    global _config
    if _config is None:
        _config = SearchConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset config (useful for testing)."""
    global _config
    _config = None
