"""Build the search bundle for a book.

Each chapter contributes one document for its page and one per heading, so a
hit can link straight to the section. Breadcrumbs join ancestor chapter names
with `` » `` and are indexed as a field of their own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any

from booksearch.book import Book, Chapter
from booksearch.config import Settings
from booksearch.search.search_index import SearchIndex


logger = logging.getLogger(__name__)

SEARCH_FIELDS: tuple[str, ...] = ("title", "body", "breadcrumbs")
BREADCRUMB_SEPARATOR = " » "


@dataclass
class SearchBundle:
    """Everything the client needs: the index, result URLs, and query options."""

    index: SearchIndex
    doc_urls: list[str] = field(default_factory=list)
    results_options: dict[str, Any] = field(default_factory=dict)
    search_options: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "doc_urls": list(self.doc_urls),
            "index": self.index.to_dict(),
            "results_options": dict(self.results_options),
            "search_options": dict(self.search_options),
        }


class _BundleBuilder:
    def __init__(self, settings: Settings) -> None:
        self.index = SearchIndex(SEARCH_FIELDS)
        self.doc_urls: list[str] = []
        self.chapters_indexed = 0
        self._next_id = 0
        self._settings = settings

    def add(self, doc: dict[str, Any], url: str) -> None:
        doc["id"] = self._next_id
        self.index.add_doc(doc)
        self.doc_urls.append(url)
        self._next_id += 1

    def add_chapter(self, chapter: Chapter, parent_breadcrumb: str) -> None:
        if chapter.is_draft:
            logger.debug("Skipping draft chapter %r", chapter.name)
            return

        page = chapter.html_path()
        breadcrumb = chapter.name if not parent_breadcrumb else parent_breadcrumb + BREADCRUMB_SEPARATOR + chapter.name

        self.add({"title": chapter.name, "body": chapter.body, "breadcrumbs": breadcrumb}, page)
        for heading in chapter.headings:
            self.add(
                {
                    "title": heading.text,
                    "body": heading.text,
                    "breadcrumbs": breadcrumb + BREADCRUMB_SEPARATOR + heading.text,
                },
                f"{page}#{heading.id}",
            )
        self.chapters_indexed += 1

        for sub_chapter in chapter.sub_items:
            self.add_chapter(sub_chapter, breadcrumb)

    def finish(self) -> SearchBundle:
        settings = self._settings
        return SearchBundle(
            index=self.index,
            doc_urls=self.doc_urls,
            results_options={
                "limit_results": settings.limit_results,
                "teaser_word_count": settings.teaser_word_count,
            },
            search_options={
                "bool": settings.bool_mode,
                "expand": settings.expand,
                "fields": settings.search_fields_boost(),
            },
        )


def build_search_index(book: Book, settings: Settings | None = None) -> SearchBundle:
    """Index every non-draft chapter of ``book`` and its headings."""
    builder = _BundleBuilder(settings or Settings())
    for chapter in book.items:
        builder.add_chapter(chapter, "")

    bundle = builder.finish()
    logger.info(
        "Built search index with %d documents from %d chapters",
        len(bundle.doc_urls),
        builder.chapters_indexed,
    )
    return bundle
