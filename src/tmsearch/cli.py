"""CLI entrypoint for tmsearch."""

import argparse
from pathlib import Path
from typing import Optional

from tmsearch.api.store import SearchStore
from tmsearch.config.loader import (
    ALLOWED_DISPLAY_MODES,
    get_display_settings,
    get_search_settings,
    load_config,
    load_config_or_defaults,
)
from tmsearch.filters.models import OWNER_KEY, STATUS_KEY, FilterState
from tmsearch.output.table import render_json, render_markdown, render_text
from tmsearch.query.source import wildcard_suggestions
from tmsearch.retrieval.client import SearchClient
from tmsearch.retrieval.fetcher import ResultFetcher
from tmsearch.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

RENDERERS = {
    "table": render_text,
    "markdown": render_markdown,
    "json": render_json,
}


def _load(config_path: Optional[Path]) -> dict:
    # An explicit --config must exist; otherwise fall back to built-in defaults
    if config_path is not None:
        return load_config(config_path)
    return load_config_or_defaults()


def build_store(config: dict) -> SearchStore:
    """Wire client, fetcher and store from a loaded config."""
    search_settings = get_search_settings(config)
    display_settings = get_display_settings(config)
    fetcher = ResultFetcher(SearchClient(search_settings))
    return SearchStore(
        fetcher=fetcher,
        display_settings=display_settings,
        query_param=search_settings["query_param"],
    )


def _apply_view_options(store: SearchStore, args: argparse.Namespace) -> None:
    filters = FilterState.from_mapping({STATUS_KEY: args.status, OWNER_KEY: args.owner})
    if not filters.is_empty:
        store.set_filters(filters)
    for name in args.owner_facet or []:
        store.toggle_owner(name)
    if args.display:
        store.set_display_mode(args.display)


def _emit(store: SearchStore, fmt: str) -> str:
    output = RENDERERS[fmt](store.snapshot())
    print(output)
    return output


def cmd_search(args: argparse.Namespace) -> str:
    """Search for a query and print the filtered table."""
    store = build_store(_load(args.config))
    store.set_query(args.query)
    _apply_view_options(store, args)
    return _emit(store, args.format)


def cmd_open(args: argparse.Namespace) -> str:
    """Read the query from a URL/location and print the filtered table."""
    store = build_store(_load(args.config))
    store.navigate(args.location)
    _apply_view_options(store, args)
    return _emit(store, args.format)


def cmd_suggest(args: argparse.Namespace) -> str:
    """Print wildcard variants of a query with their locations."""
    config = _load(args.config)
    param = get_search_settings(config)["query_param"]
    suggestions = wildcard_suggestions(args.query, param)
    if not suggestions:
        output = "No suggestions for an empty query."
    else:
        output = "\n".join(f"{s.label:<30} {s.location}" for s in suggestions)
    print(output)
    return output


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config YAML (default: $TMSEARCH_CONFIG or tmsearch.config.yaml)",
    )


def _add_view_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--status",
        type=str,
        help="Status category filter (e.g. Registered, Pending, Abandoned, Others)",
    )
    parser.add_argument(
        "--owner",
        type=str,
        help="Owner substring filter",
    )
    parser.add_argument(
        "--owner-facet",
        action="append",
        help="Toggle an owner facet checkbox (repeatable)",
    )
    parser.add_argument(
        "--display",
        type=str,
        choices=list(ALLOWED_DISPLAY_MODES),
        help="Display mode (default from config: list)",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=sorted(RENDERERS),
        default="table",
        help="Output format (default: table)",
    )


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description="tmsearch - trademark registry search")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    search_parser = subparsers.add_parser("search", help="Search for a query")
    search_parser.add_argument("query", type=str, help="Free-text search query")
    _add_common_arguments(search_parser)
    _add_view_arguments(search_parser)
    search_parser.set_defaults(func=cmd_search)

    open_parser = subparsers.add_parser("open", help="Search using the query in a URL or location")
    open_parser.add_argument("location", type=str, help="URL or location, e.g. '/?q=tesla'")
    _add_common_arguments(open_parser)
    _add_view_arguments(open_parser)
    open_parser.set_defaults(func=cmd_open)

    suggest_parser = subparsers.add_parser("suggest", help="Show wildcard variants of a query")
    suggest_parser.add_argument("query", type=str, help="Search query")
    _add_common_arguments(suggest_parser)
    suggest_parser.set_defaults(func=cmd_suggest)

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return

    try:
        args.func(args)
    except Exception as e:
        logger.error(f"Error running command '{args.command}': {e}", exc_info=True)
        raise


if __name__ == "__main__":
    main()
