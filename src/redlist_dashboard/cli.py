"""
Command-line interface for the dashboard backend.

Commands:
- info: show settings and which Red List snapshots are on disk
- serve: run the API with uvicorn
- summarize: write data/taxa-summary.json (Prefect flow)
"""

from __future__ import annotations

import argparse
import sys

import uvicorn

from redlist_dashboard import __version__
from redlist_dashboard.api.app import create_app
from redlist_dashboard.config import get_settings
from redlist_dashboard.flows.summary import summarize_taxa
from redlist_dashboard.store import SnapshotStore


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="redlist-dashboard",
        description="IUCN Red List and GBIF occurrence dashboard API",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show settings and snapshot availability")

    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Interface to bind (default: api_host from settings)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to serve on (default: api_port from settings)",
    )

    summarize_parser = subparsers.add_parser("summarize", help="Write taxa-summary.json")
    summarize_parser.add_argument(
        "--max-age-years",
        type=int,
        default=None,
        help="Assessments older than this count as outdated (default: from settings)",
    )

    return parser


def cmd_info(args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug or args.debug}")
    print(f"Data directory: {settings.data_dir}")
    print(f"IUCN API key: {'set' if settings.red_list_api_key else 'not set'}")

    store = SnapshotStore(settings.data_dir, ttl_seconds=settings.cache_ttl_seconds)
    print("Red List snapshots:")
    for taxon in store.available_taxa():
        status = f"{taxon['speciesCount']} species" if taxon["available"] else "missing"
        print(f"  {taxon['id']:<14} {status}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Handle the 'serve' command: run the API with uvicorn."""
    settings = get_settings()
    if args.debug:
        settings = settings.model_copy(update={"debug": True, "log_level": "DEBUG"})
    host = args.host if args.host is not None else settings.api_host
    port = args.port if args.port is not None else settings.api_port

    print(f"Serving API on http://{host}:{port}/ (Ctrl+C to stop)")
    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())
    return 0


def cmd_summarize(args: argparse.Namespace) -> int:
    """Handle the 'summarize' command."""
    result = summarize_taxa(max_age_years=args.max_age_years)
    if result["available"] == 0:
        print("No Red List snapshots found.", file=sys.stderr)
        return 1
    print(f"Summary written: {result['output']}")
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "serve": cmd_serve,
        "summarize": cmd_summarize,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
