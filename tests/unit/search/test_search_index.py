"""Unit tests for the index orchestrator and its serialized form."""

import math

import orjson
import pytest

from booksearch.search.analyzers import MAX_WORD_LENGTH, STOP_WORDS, stem, tokenize
from booksearch.search.search_index import ELASTICLUNR_VERSION, SearchIndex


@pytest.fixture
def fox_index() -> SearchIndex:
    index = SearchIndex(["id", "title", "body"])
    index.add_doc({"id": 1, "title": "Quick Brown Foxes", "body": "Running jumped runner's"})
    return index


@pytest.mark.unit
class TestAddDoc:
    """Documents flow through the analyzer into per-field tries."""

    def test_returns_string_reference(self, fox_index):
        assert fox_index.add_doc({"id": 2, "title": "Second"}) == "2"

    def test_stemmed_tokens_are_indexed_per_field(self, fox_index):
        title = fox_index.field_index("title")
        body = fox_index.field_index("body")

        for token in ("quick", "brown", "fox"):
            assert title.get_docs(token) == {"1": 1.0}
        for token in ("runn", "jump", "runner'"):
            assert body.get_docs(token) == {"1": 1.0}
        assert not title.has_token("runn")

    def test_missing_reference_and_null_values_render_as_nil(self):
        index = SearchIndex(["id", "title"])

        assert index.add_doc({"title": None}) == "<nil>"
        assert index.document_store.has_doc("<nil>")
        assert index.field_index("title").get_docs("<nil>") == {"<nil>": 1.0}

    def test_reference_field_trie_stays_empty(self, fox_index):
        assert fox_index.field_index("id").root.children == {}

    def test_stored_document_has_string_reference(self, fox_index):
        assert fox_index.document_store.get_doc("1") == {
            "id": "1",
            "title": "Quick Brown Foxes",
            "body": "Running jumped runner's",
        }

    def test_field_lengths_count_distinct_tokens(self):
        index = SearchIndex(["id", "title", "body"])
        index.add_doc({"id": "a", "title": "Books and books", "body": "the of and"})

        assert index.document_store.get_field_length("a", "title") == 1
        assert index.document_store.get_field_length("a", "body") == 0

    def test_weight_is_square_root_of_occurrences(self):
        index = SearchIndex(["id", "body"])
        index.add_doc({"id": 1, "body": "search search search search index"})

        assert index.field_index("body").get_docs("search") == {"1": 2.0}
        assert index.field_index("body").get_docs("index") == {"1": 1.0}

    def test_counts_are_scoped_to_each_field(self):
        index = SearchIndex(["id", "title", "body"])
        index.add_doc({"id": 1, "title": "graph", "body": "graph graph graph graph"})

        assert index.field_index("title").get_docs("graph") == {"1": 1.0}
        assert index.field_index("body").get_docs("graph") == {"1": 2.0}

    def test_document_frequency_across_documents(self):
        index = SearchIndex(["id", "body"])
        index.add_doc({"id": 1, "body": "trie"})
        index.add_doc({"id": 2, "body": "trie trie"})
        index.add_doc({"id": 1, "body": "trie"})

        assert index.field_index("body").get_doc_frequency("trie") == 2
        assert index.field_index("body").get_docs("trie") == {"1": 1.0, "2": math.sqrt(2)}
        assert index.document_store.length == 2

    def test_absent_fields_are_skipped(self):
        index = SearchIndex(["id", "title", "body"])
        index.add_doc({"id": 1, "title": "Only title"})

        assert index.document_store.get_field_length("1", "title") == 1
        assert "body" not in index.document_store.doc_info["1"]

    def test_non_string_values_are_stringified(self):
        index = SearchIndex(["id", "title", "body"])
        index.add_doc({"id": 3.0, "title": 2024, "body": True})

        assert index.document_store.has_doc("3")
        assert index.field_index("title").has_token("2024")
        assert index.field_index("body").has_token("true")

    def test_fields_outside_the_field_list_are_stored_not_indexed(self):
        index = SearchIndex(["id", "body"])
        index.add_doc({"id": 1, "body": "text", "url": "intro.html"})

        assert index.document_store.get_doc("1")["url"] == "intro.html"

    def test_every_surviving_token_is_findable(self):
        text = "Indexing the Searchable documents, with trie-based structures quickly!"
        index = SearchIndex(["id", "body"])
        index.add_doc({"id": 9, "body": text})

        body = index.field_index("body")
        for token in tokenize(text):
            if token in STOP_WORDS:
                continue
            assert body.has_token(stem(token)), token


@pytest.mark.unit
class TestLongTokens:
    """Tokens beyond the length limit never reach the trie."""

    def test_81_character_token_is_dropped(self):
        long_token = "a" * (MAX_WORD_LENGTH + 1)
        index = SearchIndex(["id", "body"])
        index.add_doc({"id": 1, "body": long_token})

        assert not index.field_index("body").has_token(long_token)
        assert index.document_store.get_field_length("1", "body") == 0

    def test_80_character_token_is_indexed(self):
        token = "x" * MAX_WORD_LENGTH
        index = SearchIndex(["id", "body"])
        index.add_doc({"id": 1, "body": token})

        assert index.field_index("body").has_token(token)
        assert index.document_store.get_field_length("1", "body") == 1

    def test_long_sentence_token_with_punctuation(self):
        long_word = "ThisLongWordIsIncludedSoWeCanCheckThatSufficientlyLongWordsAreOmittedFromTheSearchIndex."
        index = SearchIndex(["id", "title", "body"])
        index.add_doc({"id": 0, "title": "No Headers", "body": long_word})

        body = index.field_index("body")
        assert not body.has_token(long_word.lower())
        assert not body.has_token(long_word.lower().rstrip("."))


@pytest.mark.unit
class TestToDict:
    """Serialized layout read by the client runtime."""

    def test_top_level_keys_and_constants(self, fox_index):
        data = fox_index.to_dict()

        assert list(data) == ["fields", "ref", "version", "pipeline", "lang", "documentStore", "index"]
        assert data["fields"] == ["id", "title", "body"]
        assert data["ref"] == "id"
        assert data["version"] == ELASTICLUNR_VERSION == "0.9.5"
        assert data["pipeline"] == ["trimmer", "stopWordFilter", "stemmer"]
        assert data["lang"] == "English"

    def test_index_has_roots_for_indexed_fields_only(self, fox_index):
        index = fox_index.to_dict()["index"]

        assert set(index) == {"title", "body"}
        assert all(set(entry) == {"root"} for entry in index.values())

    def test_document_store_section(self, fox_index):
        store = fox_index.to_dict()["documentStore"]

        assert store["save"] is True
        assert store["length"] == 1
        assert store["docInfo"] == {"1": {"title": 3, "body": 3}}
        assert store["docs"]["1"]["id"] == "1"

    def test_trie_postings_in_wire_shape(self, fox_index):
        root = fox_index.to_dict()["index"]["title"]["root"]

        assert root["f"]["o"]["x"] == {"docs": {"1": {"tf": 1}}, "df": 1}

    def test_json_encodes(self, fox_index):
        encoded = orjson.dumps(fox_index.to_dict())

        assert b'"version":"0.9.5"' in encoded


@pytest.mark.unit
class TestFromDict:
    """Serialized indexes load back into an equivalent structure."""

    def test_round_trip(self, fox_index):
        fox_index.add_doc({"id": 2, "title": "Lazy dogs", "body": "sleeping sleeping"})
        payload = orjson.loads(orjson.dumps(fox_index.to_dict()))

        restored = SearchIndex.from_dict(payload)

        assert restored.to_dict() == fox_index.to_dict()
        assert restored.field_index("body").get_docs("sleep") == {"2": math.sqrt(2)}

    def test_unknown_and_mistyped_keys_are_ignored(self):
        restored = SearchIndex.from_dict(
            {
                "fields": ["id", "body"],
                "ref": 5,
                "extra": True,
                "documentStore": "broken",
                "index": {"body": {"root": {"a": {"df": 1, "docs": {"1": {"tf": 1}}}}}, "title": 3},
            }
        )

        assert restored.ref == "id"
        assert restored.document_store.length == 0
        assert restored.field_index("body").get_doc_frequency("a") == 1
        assert restored.indexed_fields == ("body",)
