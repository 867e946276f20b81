"""
API module - FastAPI application exposing semantic search.

Run with:
    uvicorn wiki_search.api:app
"""

from wiki_search.api.app import app, create_app, get_service

__all__ = ["app", "create_app", "get_service"]
