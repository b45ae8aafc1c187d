"""Elasticlunr-compatible search index.

The index owns one :class:`InvertedIndex` per field and a shared
:class:`DocumentStore`. Documents go in through :meth:`SearchIndex.add_doc`
during a single build pass; the finished structure comes out through
:meth:`SearchIndex.to_dict`, whose shape is read directly by the client-side
elasticlunr runtime.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence
import logging
import math
from typing import Any

from booksearch.search.analyzers import PIPELINE_LABELS, ElasticlunrAnalyzer, field_text
from booksearch.search.document_store import DocumentStore
from booksearch.search.inverted_index import InvertedIndex


logger = logging.getLogger(__name__)

ELASTICLUNR_VERSION = "0.9.5"
DEFAULT_REF = "id"
LANG = "English"


class SearchIndex:
    """Field-aware inverted index with a stored copy of every document.

    The field list is frozen at construction; adding a field later would leave
    earlier documents missing from its trie. The reference field gets a trie
    too, but its values are never tokenized so it stays empty.
    """

    def __init__(self, fields: Sequence[str], *, ref: str = DEFAULT_REF, save: bool = True) -> None:
        self.fields: tuple[str, ...] = tuple(fields)
        self.ref = ref
        self._field_indexes: dict[str, InvertedIndex] = {name: InvertedIndex() for name in self.fields}
        self._document_store = DocumentStore(save=save)
        self._analyzer = ElasticlunrAnalyzer()

    @property
    def document_store(self) -> DocumentStore:
        return self._document_store

    @property
    def indexed_fields(self) -> tuple[str, ...]:
        return tuple(name for name in self.fields if name != self.ref)

    def field_index(self, name: str) -> InvertedIndex:
        """Return the trie for ``name``; raises ``KeyError`` for unknown fields."""
        return self._field_indexes[name]

    def analyze(self, text: str) -> list[str]:
        return [token.text for token in self._analyzer(text)]

    def add_doc(self, doc: Mapping[str, Any]) -> str:
        """Index ``doc`` and return its reference.

        Re-adding a reference replaces its stored copy and overwrites the
        weights of tokens it posts again; nothing is removed.
        """
        doc_ref = field_text(doc.get(self.ref))

        stored = {key: (doc_ref if key == self.ref else value) for key, value in doc.items()}
        self._document_store.add_doc(doc_ref, stored)

        for field_name in self.indexed_fields:
            if field_name not in doc:
                continue

            tokens = self.analyze(field_text(doc[field_name]))
            # Tallies are scoped to this (document, field) pair.
            counts = Counter(tokens)
            self._document_store.add_field_length(doc_ref, field_name, len(counts))

            field_index = self._field_indexes[field_name]
            for token, count in counts.items():
                field_index.add_token(doc_ref, token, math.sqrt(count))

        logger.debug("Indexed document %s", doc_ref)
        return doc_ref

    def to_dict(self) -> dict[str, Any]:
        return {
            "fields": list(self.fields),
            "ref": self.ref,
            "version": ELASTICLUNR_VERSION,
            "pipeline": list(PIPELINE_LABELS),
            "lang": LANG,
            "documentStore": self._document_store.to_dict(),
            "index": {name: self._field_indexes[name].to_dict() for name in self.indexed_fields},
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> SearchIndex:
        """Rebuild an index from its serialized form.

        Unknown keys and mistyped entries are ignored.
        """
        fields = payload.get("fields")
        field_names: list[str] = []
        if isinstance(fields, Sequence) and not isinstance(fields, str):
            field_names = [str(name) for name in fields]
        ref = payload.get("ref")

        index = cls(field_names, ref=ref if isinstance(ref, str) else DEFAULT_REF)

        store = payload.get("documentStore")
        if isinstance(store, Mapping):
            index._document_store = DocumentStore.from_dict(store)

        tries = payload.get("index")
        if isinstance(tries, Mapping):
            for name, trie in tries.items():
                if isinstance(trie, Mapping):
                    index._field_indexes[str(name)] = InvertedIndex.from_dict(trie)

        return index
