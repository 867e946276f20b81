"""
CLI commands - entry points for search, seeding and serving.

Each command follows a consistent pattern:
1. Parse arguments
2. Load environment
3. Delegate to the service layer
4. Print results
5. Return exit code

Exit codes: 0 success, 1 service failure, 2 invalid input, 130 interrupted.
"""

from __future__ import annotations

import argparse
import json
import sys

from wiki_search.core.errors import InputError, SearchError

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INPUT_ERROR = 2


def _load_env() -> None:
    """Load environment variables from .env file."""
    from dotenv import load_dotenv

    load_dotenv()


def _setup() -> None:
    """Load .env, then configure logging and tracing from it."""
    from wiki_search.config import get_config, reset_config
    from wiki_search.logging_config import configure_logging
    from wiki_search.observability import init_tracing

    _load_env()
    reset_config()
    config = get_config()
    configure_logging(config.log_level)
    init_tracing(config)


def _build_service():
    from wiki_search.api.app import build_default_service

    return build_default_service()


def run_search_cli(argv: list[str] | None = None) -> int:
    """CLI entry point for ranked search."""
    parser = argparse.ArgumentParser(description="Rank wiki content against a query")
    parser.add_argument("query", help="Free-text search query")
    parser.add_argument("-k", "--top-k", type=int, default=None, help="Number of results")
    parser.add_argument("--collection", default=None, help="Collection to search")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    args = parser.parse_args(argv)

    _setup()

    try:
        service = _build_service()
        results = service.search(args.query, collection=args.collection, k=args.top_k)
    except InputError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except SearchError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_FAILURE

    if args.json:
        print(json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=2))
        return EXIT_OK

    print("=" * 60)
    print(f"SEARCH: {args.query}")
    print("=" * 60)

    if not results:
        print("No matches")
        return EXIT_OK

    for rank, scored in enumerate(results, start=1):
        title = scored.item.get("title", scored.id)
        print(f"  {rank}. [{scored.similarity:.3f}] {title}")
        description = scored.item.get("description")
        if description:
            print(f"        {description}")

    return EXIT_OK


def run_popular_cli(argv: list[str] | None = None) -> int:
    """CLI entry point for the unranked fallback list."""
    parser = argparse.ArgumentParser(description="List the default guide suggestions")
    parser.add_argument("--limit", type=int, default=None, help="Number of items")
    parser.add_argument("--collection", default=None, help="Collection to list")
    args = parser.parse_args(argv)

    _setup()

    try:
        items = _build_service().popular(collection=args.collection, limit=args.limit)
    except InputError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except SearchError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_FAILURE

    for item in items:
        print(f"  - {item.get('title', item.id)}")
    return EXIT_OK


def run_seed_cli(argv: list[str] | None = None) -> int:
    """CLI entry point for seeding guides and projects."""
    from wiki_search.corpus.seeds import GUIDES_COLLECTION, PROJECTS_COLLECTION, seed_content

    parser = argparse.ArgumentParser(description="Seed collections with embedded content")
    parser.add_argument(
        "target",
        nargs="?",
        default="all",
        choices=["guides", "projects", "all"],
        help="Which collection to seed",
    )
    args = parser.parse_args(argv)

    _setup()

    collections = {
        "guides": (GUIDES_COLLECTION,),
        "projects": (PROJECTS_COLLECTION,),
        "all": (GUIDES_COLLECTION, PROJECTS_COLLECTION),
    }[args.target]

    try:
        service = _build_service()
        reports = seed_content(service.store, service.embeddings, collections)
    except SearchError as e:
        print(f"Error seeding content: {e.message}", file=sys.stderr)
        return EXIT_FAILURE

    for report in reports:
        print(f"{report.collection}: added {len(report.added)}, skipped {len(report.skipped)}")
    return EXIT_OK


def run_serve_cli(argv: list[str] | None = None) -> int:
    """CLI entry point for the HTTP API."""
    import uvicorn

    parser = argparse.ArgumentParser(description="Serve the search API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args(argv)

    _setup()

    uvicorn.run("wiki_search.api:app", host=args.host, port=args.port)
    return EXIT_OK


def main() -> int:
    """
    Main CLI entry point with subcommands.

    Usage:
        wiki-search search "query" [-k N]   # Ranked results
        wiki-search popular                 # Unranked fallback list
        wiki-search seed [guides|projects]  # Seed content with embeddings
        wiki-search serve                   # Run the HTTP API
    """
    parser = argparse.ArgumentParser(
        description="Semantic search for wiki guides and projects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  search      Rank content against a query
  popular     List the default suggestions (no ranking)
  seed        Seed guides and projects with embeddings
  serve       Run the HTTP API

Examples:
  wiki-search seed all
  wiki-search search "hvordan lage wireframes" -k 3
  wiki-search serve --port 8080
        """,
    )

    parser.add_argument(
        "command",
        choices=["search", "popular", "seed", "serve"],
        help="Command to run",
    )

    # Parse just the command first
    args, remaining = parser.parse_known_args()

    commands = {
        "search": run_search_cli,
        "popular": run_popular_cli,
        "seed": run_seed_cli,
        "serve": run_serve_cli,
    }

    try:
        return commands[args.command](remaining)
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
