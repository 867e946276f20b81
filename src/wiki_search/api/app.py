"""
HTTP boundary for semantic search.

Endpoints:
    POST /api/search          ranked guides for a query
    GET  /api/popular-guides  unranked fallback list
    POST /api/guides/embed    embedding for authored content
    GET  /health              liveness

Errors are translated here and only here: InputError -> 400,
EmbeddingServiceError and any other SearchError -> 500, always as
{"error": code, "message": ...}.
"""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from wiki_search.api.schemas import (
    EmbedRequest,
    EmbedResponse,
    ErrorResponse,
    HealthResponse,
    SearchRequest,
    SearchResults,
)
from wiki_search.config import VERSION, get_config
from wiki_search.core.errors import (
    EmbeddingServiceError,
    InputError,
    SearchError,
    ServiceUnavailableError,
)
from wiki_search.search.service import SemanticSearchService

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def build_default_service() -> SemanticSearchService:
    """
    Service wired from environment configuration.

    Raises:
        ServiceUnavailableError: configuration is invalid or the store
            cannot be opened
    """
    from wiki_search.corpus.store import get_document_store
    from wiki_search.embeddings import get_embedding_provider

    try:
        config = get_config()
        return SemanticSearchService(
            store=get_document_store(config=config),
            embeddings=get_embedding_provider(config=config),
            config=config,
        )
    except SearchError:
        raise
    except Exception as e:
        logger.error(f"Could not build search service: {e}")
        raise ServiceUnavailableError(f"Could not build search service: {e}") from e


def get_service(request: Request) -> SemanticSearchService:
    """Dependency: the app's service, built on first use."""
    if request.app.state.service is None:
        request.app.state.service = build_default_service()
    return request.app.state.service


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code, "message": message})


def create_app(service: SemanticSearchService | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        service: Search service to use. Built lazily from the environment
            when omitted, so importing this module never needs credentials.
    """
    app = FastAPI(
        title="Wiki Search API",
        version=VERSION,
        description="Semantic search over wiki guides and projects",
    )
    app.state.service = service

    @app.exception_handler(InputError)
    async def input_error_handler(request: Request, exc: InputError) -> JSONResponse:
        return _error(400, exc.code, exc.message)

    @app.exception_handler(EmbeddingServiceError)
    async def embedding_error_handler(request: Request, exc: EmbeddingServiceError) -> JSONResponse:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return _error(500, exc.code, "Failed to generate embedding")

    @app.exception_handler(SearchError)
    async def search_error_handler(request: Request, exc: SearchError) -> JSONResponse:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return _error(500, exc.code, "Search service unavailable")

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, InputError.code, "Request body is invalid")

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(status="ok", version=VERSION)

    @app.post("/api/search", response_model=SearchResults, responses=ERROR_RESPONSES)
    def search_guides(
        body: SearchRequest,
        service: SemanticSearchService = Depends(get_service),
    ) -> SearchResults:
        """Top-K guides by cosine similarity to the query."""
        results = service.search(body.query)
        return [scored.to_dict() for scored in results]

    @app.get("/api/popular-guides", response_model=SearchResults)
    def popular_guides(service: SemanticSearchService = Depends(get_service)) -> SearchResults:
        """First guides in the collection. No ranking is applied."""
        return [item.to_record(include_embedding=False) for item in service.popular()]

    @app.post("/api/guides/embed", response_model=EmbedResponse, responses=ERROR_RESPONSES)
    def embed_guide(
        body: EmbedRequest,
        service: SemanticSearchService = Depends(get_service),
    ) -> EmbedResponse:
        """Embedding for guide content, used when guides are created or edited."""
        vector = service.embed_text(body.text)
        return EmbedResponse(embedding=vector.tolist())

    return app


app = create_app()
