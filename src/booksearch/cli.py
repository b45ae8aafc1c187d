"""CLI for building a book's ``searchindex.js``."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys
import time

from pydantic import ValidationError

from booksearch.book import Book, BookLoadError
from booksearch.config import Settings
from booksearch.observability import configure_logging, configure_trace_exporter, create_span, init_tracing
from booksearch.observability.context import bind_book
from booksearch.search.builder import build_search_index
from booksearch.search.embed import write_search_index


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_BOOK_ERROR = 2
EXIT_WRITE_ERROR = 3


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="booksearch-index",
        description="Build the client-side search index for a book manifest",
    )
    parser.add_argument(
        "book",
        type=Path,
        help="Path to the JSON book manifest (chapters with plain-text bodies)",
    )
    parser.add_argument(
        "--dest",
        type=Path,
        default=Path("book"),
        help="Directory the search index is written to (default: ./book)",
    )
    parser.add_argument(
        "--json",
        dest="write_json",
        action="store_true",
        default=None,
        help="Also write the raw bundle as searchindex.json",
    )
    parser.add_argument(
        "--log-level",
        help="Override BOOKSEARCH_LOG_LEVEL (debug, info, warning, error)",
    )
    parser.add_argument(
        "--plain-logs",
        action="store_true",
        help="Emit human-readable log lines instead of JSON",
    )
    return parser


def run_build(book_path: Path, dest: Path, settings: Settings) -> int:
    """Load ``book_path`` and write its search index into ``dest``."""
    if not settings.search_enabled:
        logger.info("Search is disabled; not writing %s", settings.output_filename)
        return EXIT_OK

    start = time.perf_counter()
    with create_span("search.build", attributes={"book.manifest": str(book_path)}) as span:
        try:
            book = Book.load(book_path)
        except BookLoadError as exc:
            logger.error("%s", exc)
            return EXIT_BOOK_ERROR

        bind_book(book.title)
        bundle = build_search_index(book, settings)
        span.set_attribute("search.documents", len(bundle.doc_urls))
        try:
            write_search_index(
                dest,
                bundle,
                filename=settings.output_filename,
                write_json=settings.write_json,
            )
        except OSError as exc:
            logger.error("Cannot write search index to %s: %s", dest, exc)
            return EXIT_WRITE_ERROR

    logger.info(
        "Search index ready in %.2fs",
        time.perf_counter() - start,
        extra={"documents": len(bundle.doc_urls), "dest": dest},
    )
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = build_argument_parser().parse_args(argv)

    overrides: dict[str, object] = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.plain_logs:
        overrides["log_json"] = False
    if args.write_json is not None:
        overrides["write_json"] = args.write_json

    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)  # noqa: T201 - logging not configured yet
        return EXIT_CONFIG_ERROR

    configure_logging(settings.log_level, settings.log_json)
    provider = init_tracing()
    configure_trace_exporter(settings, provider)
    try:
        return run_build(args.book, args.dest, settings)
    finally:
        provider.force_flush()


if __name__ == "__main__":
    sys.exit(main())
