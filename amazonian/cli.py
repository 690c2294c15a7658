"""Command line helpers for the amazonian client."""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, TextIO

from tqdm import tqdm

from .client import Amazonian
from .configuration import load_configuration
from .exceptions import ConfigurationError, RequestError
from .models import Item

logger = logging.getLogger(__name__)

OUTPUT_FIELDS = ["asin", "title", "detail_page_url"]


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Query the Amazon Product Advertising API")
    parser.add_argument("--env-file", default=".env", help="Path to a .env file holding credentials")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity",
    )
    parser.add_argument("--no-cache", action="store_true", help="Disable last-request memoization")
    parser.add_argument("--output", help="Write CSV results to this file instead of stdout")

    commands = parser.add_subparsers(dest="command", required=True)
    lookup = commands.add_parser("lookup", help="Look up one or more ASINs")
    lookup.add_argument("asin", nargs="+", help="ASINs to look up")
    search = commands.add_parser("search", help="Search by keywords")
    search.add_argument("keywords", help="Search keywords")
    search.add_argument("--search-index", help="Search index (defaults to the configured one)")
    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def lookup_asins(client: Amazonian, asins: Iterable[str], *, progress: bool = True) -> List[Item]:
    """Look up each ASIN once; failed lookups are logged and skipped."""

    unique = list(dict.fromkeys(asins))
    results: List[Item] = []
    for asin in tqdm(unique, desc="Looking up ASINs", unit="asin", disable=not progress):
        try:
            results.append(client.lookup(asin))
        except RequestError as exc:
            logger.error("Lookup failed for %s: %s", asin, exc)
    return results


def write_items(stream: TextIO, items: Iterable[Item]) -> None:
    writer = csv.DictWriter(stream, fieldnames=OUTPUT_FIELDS)
    writer.writeheader()
    for item in items:
        writer.writerow(
            {"asin": item.asin or "", "title": item.title or "", "detail_page_url": item.detail_page_url or ""}
        )


@contextmanager
def _open_output(path: Optional[str]) -> Iterator[TextIO]:
    if not path:
        yield sys.stdout
        return
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8") as handle:
        yield handle


def main(argv: Optional[Sequence[str]] = None, client: Optional[Amazonian] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    if client is None:
        configuration = load_configuration(args.env_file)
        if configuration is None:
            logger.error("Access key and secret key are required (AMAZONIAN_ACCESS_KEY / AMAZONIAN_SECRET_KEY)")
            return 1
        client = Amazonian(configuration)
    if args.no_cache:
        client.configuration.setup(cache_last=False)

    try:
        if args.command == "lookup":
            items = lookup_asins(client, args.asin)
        else:
            params = {}
            if args.search_index:
                params["SearchIndex"] = args.search_index
            items = client.search(args.keywords, **params).items
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 1
    except RequestError as exc:
        logger.error("%s", exc)
        return 1

    with _open_output(args.output) as stream:
        write_items(stream, items)
    logger.info("Wrote %d item(s)", len(items))
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
