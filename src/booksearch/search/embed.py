"""Embed a serialized search bundle into the page-loaded ``searchindex.js``.

The script merges the bundle into the client's ``window.search`` namespace by
parsing a single-quoted JSON string literal, so backslashes and single quotes
in the JSON text have to be escaped once more for JavaScript.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
from pathlib import Path
from typing import Any

import orjson

from booksearch.search.builder import SearchBundle


logger = logging.getLogger(__name__)

DEFAULT_SCRIPT_NAME = "searchindex.js"
JSON_FILENAME = "searchindex.json"

_SCRIPT_TEMPLATE = "window.search = Object.assign(window.search, JSON.parse('{payload}'));"


def dumps_bundle(payload: Mapping[str, Any]) -> str:
    """Compact JSON with keys sorted at every level."""
    return orjson.dumps(payload, option=orjson.OPT_SORT_KEYS).decode("utf-8")


def escape_js_string(text: str) -> str:
    """Escape ``text`` for a single-quoted JavaScript string literal."""
    # Backslashes first so the quote escapes are not doubled.
    return text.replace("\\", "\\\\").replace("'", "\\'")


def render_search_js(payload: Mapping[str, Any]) -> str:
    return _SCRIPT_TEMPLATE.format(payload=escape_js_string(dumps_bundle(payload)))


def write_search_index(
    dest_dir: Path,
    bundle: SearchBundle,
    *,
    filename: str = DEFAULT_SCRIPT_NAME,
    write_json: bool = False,
) -> list[Path]:
    """Write ``searchindex.js`` (and optionally the raw JSON) into ``dest_dir``."""
    dest_dir.mkdir(parents=True, exist_ok=True)
    payload = bundle.to_dict()
    written: list[Path] = []

    script_path = dest_dir / filename
    script_path.write_text(render_search_js(payload), encoding="utf-8")
    written.append(script_path)

    if write_json:
        json_path = dest_dir / JSON_FILENAME
        json_path.write_text(dumps_bundle(payload), encoding="utf-8")
        written.append(json_path)

    logger.info("Wrote search index to %s", ", ".join(str(path) for path in written))
    return written
