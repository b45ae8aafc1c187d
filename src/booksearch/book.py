"""Structural model of a book handed to the search indexer.

The loader that renders markdown is not part of this package: it hands over
chapters whose ``body`` is already plain text (HTML stripped) together with
the headings it extracted. This module validates that hand-off, typically a
JSON manifest such as::

    {
      "title": "My Book",
      "items": [
        {
          "name": "Introduction",
          "path": "intro.md",
          "body": "Welcome to the book ...",
          "headings": [{"text": "Getting started", "id": "getting-started"}],
          "sub_items": []
        }
      ]
    }
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Annotated

import orjson
from pydantic import BaseModel, Field, ValidationError


class BookLoadError(ValueError):
    """Raised when a book manifest cannot be read or validated."""


class Heading(BaseModel):
    """A heading extracted from a rendered chapter."""

    model_config = {"extra": "forbid"}

    text: Annotated[str, Field(description="Heading text with markup removed")]
    id: Annotated[str, Field(description="Anchor id of the heading in the rendered page")]


class Chapter(BaseModel):
    """A chapter and its nested sub-chapters.

    A chapter without a ``path`` is a draft: it has no page, so neither it nor
    its sub-items are searchable.
    """

    model_config = {"extra": "forbid"}

    name: Annotated[str, Field(description="Chapter title as shown in the table of contents")]
    path: Annotated[
        str | None,
        Field(description="Source path relative to the book's src directory, e.g. 'guide/setup.md'"),
    ] = None
    body: Annotated[str, Field(description="Plain-text chapter content")] = ""
    headings: list[Heading] = Field(default_factory=list)
    sub_items: list[Chapter] = Field(default_factory=list)

    @property
    def is_draft(self) -> bool:
        return self.path is None

    def html_path(self) -> str:
        """Rendered page path: ``.md`` becomes ``.html`` and separators become ``/``."""
        if self.path is None:
            raise ValueError(f"Draft chapter {self.name!r} has no rendered page")
        path = self.path.removesuffix(".md") + ".html"
        return path.replace("\\", "/")


class Book(BaseModel):
    """Top-level collection of chapters."""

    model_config = {"extra": "forbid"}

    title: str | None = None
    items: list[Chapter] = Field(default_factory=list)

    def iter_chapters(self) -> Iterator[Chapter]:
        """Yield every chapter depth-first, drafts included."""

        def walk(chapters: list[Chapter]) -> Iterator[Chapter]:
            for chapter in chapters:
                yield chapter
                yield from walk(chapter.sub_items)

        return walk(self.items)

    @classmethod
    def load(cls, path: Path) -> Book:
        """Read and validate a JSON book manifest."""
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise BookLoadError(f"Cannot read book manifest {path}: {exc}") from exc

        try:
            return cls.model_validate(orjson.loads(raw))
        except orjson.JSONDecodeError as exc:
            raise BookLoadError(f"Book manifest {path} is not valid JSON: {exc}") from exc
        except ValidationError as exc:
            raise BookLoadError(f"Book manifest {path} is invalid: {exc}") from exc


Chapter.model_rebuild()
