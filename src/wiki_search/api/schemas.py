"""
Request and response models for the HTTP API.

Required fields are declared Optional on purpose: a missing query or text
is reported by the service as a 400 with a specific error code, instead
of FastAPI's generic 422.
"""

from typing import Any

from pydantic import BaseModel, Field


class SearchRequest(BaseModel):
    """Body of POST /api/search."""

    query: str | None = Field(
        default=None,
        description="Free-text query to rank content against",
    )


class EmbedRequest(BaseModel):
    """Body of POST /api/guides/embed."""

    text: str | None = Field(
        default=None,
        description="Content text to embed (title, description and content joined)",
    )


class EmbedResponse(BaseModel):
    embedding: list[float]


class ErrorResponse(BaseModel):
    """Error payload. Never carries a stack trace."""

    error: str = Field(description="Machine-readable error code, e.g. 'missing_query'")
    message: str


class HealthResponse(BaseModel):
    status: str
    version: str


# Ranked items keep every stored field, so they are plain dicts
SearchResults = list[dict[str, Any]]
