"""Command line access to the catalog search engine.

Loads a JSON catalog file, builds one snapshot and runs a single query
against it. Results go to stdout as JSON; logs go to stderr.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys
from typing import Any

import orjson
from pydantic import BaseModel

from catalog_search.adapters.catalog_store import JsonFileCatalogStore
from catalog_search.config import Settings
from catalog_search.observability.logging import configure_logging
from catalog_search.service_layer.analysis_service import CatalogAnalysisService
from catalog_search.service_layer.search_service import CatalogReloadError, CatalogSearchService


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_CATALOG_FAILURE = 2


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog-search",
        description="Search, autocomplete and rank a JSON product catalog",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        help="Path to the catalog JSON file (defaults to CATALOG_SEARCH_CATALOG_PATH)",
    )
    parser.add_argument(
        "--log-level",
        help="Log level for diagnostics (defaults to CATALOG_SEARCH_LOG_LEVEL)",
    )
    parser.add_argument(
        "--plain-logs",
        action="store_true",
        help="Emit plain text logs instead of JSON",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    search = commands.add_parser("search", help="Ranked search without spelling correction")
    search.add_argument("query")
    search.add_argument("--page", type=int, default=0, help="Zero-based page number")
    search.add_argument("--size", type=int, help="Page size (defaults to the configured page size)")

    correct = commands.add_parser("correct", help="Search and report spelling corrections")
    correct.add_argument("query")
    correct.add_argument("--page", type=int, default=0, help="Zero-based page number")
    correct.add_argument("--size", type=int, help="Page size (defaults to the configured page size)")

    autocomplete = commands.add_parser("autocomplete", help="Prefix suggestions")
    autocomplete.add_argument("prefix")

    rank_stores = commands.add_parser("rank-stores", help="Stores ranked by keyword occurrences")
    rank_stores.add_argument("keyword")

    top_deals = commands.add_parser("top-deals", help="Items with the largest discounts")
    top_deals.add_argument("--limit", type=int, default=10, help="Maximum deals to print")

    return parser


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, list):
        return [_to_jsonable(entry) for entry in value]
    return value


def _run_command(args: argparse.Namespace, service: CatalogSearchService) -> Any:
    if args.command == "search":
        return service.search(args.query, page=args.page, size=args.size)
    if args.command == "correct":
        return service.search_with_correction(args.query, page=args.page, size=args.size)
    if args.command == "autocomplete":
        return service.autocomplete(args.prefix)
    if args.command == "rank-stores":
        return service.rank_stores_by_keyword(args.keyword)
    if args.command == "top-deals":
        return CatalogAnalysisService(service).top_deals(args.limit)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    settings = Settings()
    configure_logging(
        args.log_level or settings.log_level,
        json_output=settings.log_json and not args.plain_logs,
        stream=sys.stderr,
    )

    catalog_path = args.catalog or settings.catalog_path
    if catalog_path is None:
        logger.error("No catalog file given; pass --catalog or set CATALOG_SEARCH_CATALOG_PATH")
        return EXIT_USAGE

    try:
        service = CatalogSearchService(JsonFileCatalogStore(catalog_path), settings=settings)
    except CatalogReloadError as exc:
        logger.error("Cannot load catalog %s: %s", catalog_path, exc)
        return EXIT_CATALOG_FAILURE

    result = _run_command(args, service)
    sys.stdout.write(orjson.dumps(_to_jsonable(result), option=orjson.OPT_INDENT_2).decode("utf-8") + "\n")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
