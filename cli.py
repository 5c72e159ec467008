"""
CLI utility for managing the manga ingestion backend.

Usage:
    python cli.py init-db                                   # Create tables
    python cli.py providers                                 # List providers
    python cli.py scrape-manga-list <provider>              # Scrape series index
    python cli.py scrape-manga <provider> <slug>            # Scrape a series
    python cli.py scrape-chapter-list <provider> <slug>     # Scrape a chapter list
    python cli.py scrape-chapter <provider> <manga> <slug>  # Scrape a chapter
    python cli.py enqueue <type> <provider> [--slug] [--manga]
    python cli.py status <id>                               # Show a request status
"""
import argparse
import json
import logging
import sys

from catalog import Catalog
from config import settings
from database import init_db
from ingestion_queue import IngestionQueue, build_orchestrator
from models import RequestType
from providers import ProviderRegistry
from schemas import IngestionOutcome, IngestionRequest
from store import SqlStore


def print_outcome(outcome: IngestionOutcome):
    """Print an outcome and exit non-zero on failure."""
    print(f"{outcome.status} {outcome.status_text}")
    if outcome.data is not None:
        print(json.dumps(outcome.data, indent=2, ensure_ascii=False, default=str))
    if outcome.status >= 400:
        sys.exit(1)


def cmd_init_db(args):
    """Create database tables."""
    init_db()
    print("✓ Tables created")


def cmd_providers(args):
    """List registered providers."""
    registry = ProviderRegistry.from_settings()

    print(f"\n{'Name':<12} {'List URL':<60}")
    print("-" * 72)

    for name in registry.names():
        print(f"{name:<12} {registry.resolve(name).list_url:<60}")

    print(f"\nTotal: {len(registry.names())} providers")


def cmd_scrape(args):
    """Run a scrape request immediately."""
    request = IngestionRequest(
        request_type=args.request_type,
        provider=args.provider,
        slug=getattr(args, "slug", None),
        manga=getattr(args, "manga", None),
    )
    print_outcome(build_orchestrator().dispatch(request))


def cmd_enqueue(args):
    """Queue a scrape request for the worker."""
    request = IngestionRequest(
        request_type=args.request_type,
        provider=args.provider,
        slug=args.slug,
        manga=args.manga,
    )
    job_id = IngestionQueue().enqueue_request(request)
    print(f"Queued {request.request_type.value} as job {job_id}")


def cmd_status(args):
    """Show a request status."""
    catalog = Catalog(store=SqlStore(), providers=ProviderRegistry.from_settings())
    print_outcome(catalog.status(args.id))


def main():
    """Main CLI entry point."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    parser = argparse.ArgumentParser(
        description="Manga Ingestion Backend CLI"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    init_parser = subparsers.add_parser("init-db", help="Create database tables")
    init_parser.set_defaults(func=cmd_init_db)

    providers_parser = subparsers.add_parser("providers", help="List providers")
    providers_parser.set_defaults(func=cmd_providers)

    # Scrape commands
    manga_list_parser = subparsers.add_parser(
        "scrape-manga-list", help="Scrape a provider's series index"
    )
    manga_list_parser.add_argument("provider")
    manga_list_parser.set_defaults(func=cmd_scrape, request_type=RequestType.MANGA_LIST)

    manga_parser = subparsers.add_parser("scrape-manga", help="Scrape a series page")
    manga_parser.add_argument("provider")
    manga_parser.add_argument("slug", help="Series slug")
    manga_parser.set_defaults(func=cmd_scrape, request_type=RequestType.MANGA)

    chapter_list_parser = subparsers.add_parser(
        "scrape-chapter-list", help="Scrape the chapter list of a series"
    )
    chapter_list_parser.add_argument("provider")
    chapter_list_parser.add_argument("slug", help="Series slug")
    chapter_list_parser.set_defaults(func=cmd_scrape, request_type=RequestType.CHAPTER_LIST)

    chapter_parser = subparsers.add_parser("scrape-chapter", help="Scrape a chapter page")
    chapter_parser.add_argument("provider")
    chapter_parser.add_argument("manga", help="Series slug")
    chapter_parser.add_argument("slug", help="Chapter slug")
    chapter_parser.set_defaults(func=cmd_scrape, request_type=RequestType.CHAPTER)

    # Enqueue command
    enqueue_parser = subparsers.add_parser("enqueue", help="Queue a scrape request")
    enqueue_parser.add_argument(
        "request_type",
        type=RequestType,
        choices=list(RequestType),
        help="Request kind"
    )
    enqueue_parser.add_argument("provider")
    enqueue_parser.add_argument("--slug", default=None, help="Series or chapter slug")
    enqueue_parser.add_argument("--manga", default=None, help="Series slug (chapters only)")
    enqueue_parser.set_defaults(func=cmd_enqueue)

    # Status command
    status_parser = subparsers.add_parser("status", help="Show a request status")
    status_parser.add_argument("id", help="Status id (provider or provider_series)")
    status_parser.set_defaults(func=cmd_status)

    # Parse arguments
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Run command
    args.func(args)


if __name__ == "__main__":
    main()
