"""
Embeddings Module - Single Responsibility: Generate text embeddings.

It has ONE job: convert text to vector embeddings. How the model works
is not our concern; failures are reported as EmbeddingServiceError and
never retried here.
"""

from __future__ import annotations

import hashlib
import logging
import os
from typing import TYPE_CHECKING

import numpy as np
from openai import OpenAI, OpenAIError

from wiki_search.core.errors import EmbeddingServiceError
from wiki_search.core.protocols import EmbeddingProvider

if TYPE_CHECKING:
    from wiki_search.config import SearchConfig

logger = logging.getLogger(__name__)

MODEL_DIMENSIONS = {
    "text-embedding-ada-002": 1536,
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
}


class OpenAIEmbeddings:
    """
    OpenAI-based embedding provider.

    Uses text-embedding-ada-002 by default (1536 dimensions), the model
    the stored guide and project vectors were generated with.
    """

    def __init__(
        self,
        model: str = "text-embedding-ada-002",
        api_key: str | None = None,
        timeout: float = 30.0,
        client: OpenAI | None = None,
    ):
        self.model = model
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    @property
    def client(self) -> OpenAI:
        """OpenAI client, created on first use so a missing key only fails embedding calls."""
        if self._client is None:
            try:
                self._client = OpenAI(
                    api_key=self._api_key or os.environ.get("OPENAI_API_KEY"),
                    timeout=self._timeout,
                    max_retries=0,
                )
            except OpenAIError as e:
                logger.error(f"Could not create OpenAI client: {e}")
                raise EmbeddingServiceError(f"Could not create OpenAI client: {e}") from e
        return self._client

    @property
    def dimensions(self) -> int:
        """Return embedding dimensions for the model."""
        return MODEL_DIMENSIONS.get(self.model, 1536)

    def embed(self, text: str) -> np.ndarray:
        """Generate embedding for a single text."""
        try:
            response = self.client.embeddings.create(
                input=text,
                model=self.model
            )
        except OpenAIError as e:
            logger.error(f"OpenAI embedding request failed: {e}")
            raise EmbeddingServiceError(f"Failed to generate embedding: {e}") from e
        return np.array(response.data[0].embedding, dtype=np.float64)

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts in one request."""
        if not texts:
            return []

        try:
            response = self.client.embeddings.create(
                input=texts,
                model=self.model
            )
        except OpenAIError as e:
            logger.error(f"OpenAI batch embedding request failed: {e}")
            raise EmbeddingServiceError(f"Failed to generate embeddings: {e}") from e

        # The API may return items out of order; index restores input order
        ordered = sorted(response.data, key=lambda item: item.index)
        return [
            np.array(item.embedding, dtype=np.float64)
            for item in ordered
        ]


class MockEmbeddings:
    """
    Mock embedding provider for testing without API calls.

    Generates deterministic pseudo-embeddings from text hashes.
    NOT for production use - only for testing/development.
    """

    def __init__(self, dimensions: int = 1536):
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed(self, text: str) -> np.ndarray:
        """Generate deterministic pseudo-embedding in [-1, 1] from text hash."""
        values = []
        counter = 0
        while len(values) < self._dimensions:
            digest = hashlib.sha256(f"{counter}:{text}".encode()).digest()
            values.extend(digest)
            counter += 1
        raw = np.array(values[:self._dimensions], dtype=np.float64)
        return raw / 127.5 - 1.0

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts."""
        return [self.embed(text) for text in texts]


def get_embedding_provider(
    use_mock: bool | None = None,
    config: SearchConfig | None = None,
) -> EmbeddingProvider:
    """
    Factory function to get the appropriate embedding provider.

    Args:
        use_mock: If True, return MockEmbeddings. Defaults to the
            USE_MOCK_EMBEDDINGS setting.
        config: Search configuration (global config if not provided)
    """
    if config is None:
        from wiki_search.config import get_config
        config = get_config()

    if use_mock is None:
        use_mock = config.use_mock_embeddings

    if use_mock:
        return MockEmbeddings(dimensions=MODEL_DIMENSIONS.get(config.embedding_model, 1536))
    return OpenAIEmbeddings(
        model=config.embedding_model,
        timeout=float(config.embedding_timeout_sec),
    )
