"""
Seed data for the guides and projects collections.

Separating content from infrastructure keeps the stores generic and lets
tests seed controlled data.
"""

from wiki_search.corpus.seeds.content import (
    GUIDES_COLLECTION,
    PROJECTS_COLLECTION,
    get_seed_guides,
    get_seed_projects,
    seed_content,
)

__all__ = [
    "GUIDES_COLLECTION",
    "PROJECTS_COLLECTION",
    "get_seed_guides",
    "get_seed_projects",
    "seed_content",
]
