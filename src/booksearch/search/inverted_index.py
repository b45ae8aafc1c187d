"""Per-field inverted index stored as a character trie.

Every node carries the postings (``docs``: document reference -> term weight)
and document frequency (``df``) of the token spelled by the path from the
root. The serialized form flattens children into the same object as ``docs``
and ``df``: each child appears under its single-character edge label, with no
wrapping key. The client runtime reads exactly that shape, so both directions
are written by hand instead of relying on generic dataclass serialization.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


DOCS_KEY = "docs"
DF_KEY = "df"
TF_KEY = "tf"


@dataclass
class IndexNode:
    """A trie node: postings for the token ending here plus child edges."""

    docs: dict[str, float] = field(default_factory=dict)
    df: int = 0
    children: dict[str, IndexNode] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.docs:
            data[DOCS_KEY] = {ref: {TF_KEY: _wire_number(weight)} for ref, weight in self.docs.items()}
        if self.df > 0:
            data[DF_KEY] = self.df
        for label, child in self.children.items():
            data[label] = child.to_dict()
        return data

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> IndexNode:
        """Rebuild a node, ignoring entries that do not fit the expected shape.

        Foreign or partially populated payloads are tolerated: malformed
        ``docs`` entries and a non-numeric ``df`` are skipped, and any other
        key holding a mapping is read as a child edge.
        """
        node = cls()
        for key, value in payload.items():
            if key == DOCS_KEY:
                if isinstance(value, Mapping):
                    node.docs = _parse_postings(value)
            elif key == DF_KEY:
                if _is_number(value):
                    node.df = int(value)
            elif isinstance(value, Mapping):
                node.children[key] = cls.from_dict(value)
        return node


class InvertedIndex:
    """Trie-backed inverted index for a single document field."""

    def __init__(self, root: IndexNode | None = None) -> None:
        self.root = root if root is not None else IndexNode()

    def add_token(self, ref: str, token: str, weight: float) -> None:
        """Post ``weight`` for ``ref`` under ``token``.

        ``df`` counts distinct references; posting the same reference again
        overwrites its weight without touching ``df``.
        """
        if not token:
            return

        node = self.root
        for char in token:
            child = node.children.get(char)
            if child is None:
                child = IndexNode()
                node.children[char] = child
            node = child

        if ref not in node.docs:
            node.df += 1
        node.docs[ref] = weight

    def get_node(self, token: str) -> IndexNode | None:
        node = self.root
        for char in token:
            node = node.children.get(char)
            if node is None:
                return None
        return node

    def has_token(self, token: str) -> bool:
        return self.get_node(token) is not None

    def get_docs(self, token: str) -> dict[str, float] | None:
        node = self.get_node(token)
        if node is None:
            return None
        return dict(node.docs)

    def get_doc_frequency(self, token: str) -> int:
        node = self.get_node(token)
        if node is None:
            return 0
        return node.df

    def to_dict(self) -> dict[str, Any]:
        return {"root": self.root.to_dict()}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> InvertedIndex:
        root = payload.get("root")
        if not isinstance(root, Mapping):
            return cls()
        return cls(IndexNode.from_dict(root))


def _parse_postings(payload: Mapping[str, Any]) -> dict[str, float]:
    postings: dict[str, float] = {}
    for ref, entry in payload.items():
        if not isinstance(entry, Mapping):
            continue
        weight = entry.get(TF_KEY)
        if _is_number(weight):
            postings[str(ref)] = float(weight)
    return postings


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _wire_number(value: float) -> int | float:
    # Integral weights are written as JSON integers ("1", not "1.0").
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
