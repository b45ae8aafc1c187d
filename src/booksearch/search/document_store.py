"""Stored document payloads and per-field token counts."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class DocumentStore:
    """Keeps the original field values and field lengths keyed by reference.

    Field lengths (distinct stemmed tokens per field) are not used while
    building; the client-side scorer reads them from ``docInfo``.
    """

    def __init__(self, save: bool = True) -> None:
        self.save = save
        self.docs: dict[str, dict[str, Any]] = {}
        self.doc_info: dict[str, dict[str, int]] = {}
        self.length = 0

    def add_doc(self, ref: str, doc: Mapping[str, Any]) -> None:
        if ref not in self.docs:
            self.length += 1
        self.docs[ref] = dict(doc) if self.save else {}

    def get_doc(self, ref: str) -> dict[str, Any] | None:
        return self.docs.get(ref)

    def has_doc(self, ref: str) -> bool:
        return ref in self.docs

    def add_field_length(self, ref: str, field_name: str, length: int) -> None:
        self.doc_info.setdefault(ref, {})[field_name] = length

    def get_field_length(self, ref: str, field_name: str) -> int:
        return self.doc_info.get(ref, {}).get(field_name, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "save": self.save,
            "docs": {ref: dict(doc) for ref, doc in self.docs.items()},
            "docInfo": {ref: dict(info) for ref, info in self.doc_info.items()},
            "length": self.length,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> DocumentStore:
        save = payload.get("save", True)
        store = cls(save=save if isinstance(save, bool) else True)

        docs = payload.get("docs")
        if isinstance(docs, Mapping):
            store.docs = {str(ref): dict(doc) for ref, doc in docs.items() if isinstance(doc, Mapping)}

        doc_info = payload.get("docInfo")
        if isinstance(doc_info, Mapping):
            for ref, info in doc_info.items():
                if not isinstance(info, Mapping):
                    continue
                store.doc_info[str(ref)] = {
                    str(name): int(length)
                    for name, length in info.items()
                    if isinstance(length, (int, float)) and not isinstance(length, bool)
                }

        length = payload.get("length")
        if isinstance(length, int) and not isinstance(length, bool):
            store.length = length
        else:
            store.length = len(store.docs)
        return store
