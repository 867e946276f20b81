"""
CLI module - unified command-line interface.

Provides entry points for:
- Ranked search and the unranked fallback list
- Seeding collections
- Serving the HTTP API
"""

from wiki_search.cli.commands import (
    main,
    run_search_cli,
    run_popular_cli,
    run_seed_cli,
    run_serve_cli,
)

__all__ = [
    "main",
    "run_search_cli",
    "run_popular_cli",
    "run_seed_cli",
    "run_serve_cli",
]
