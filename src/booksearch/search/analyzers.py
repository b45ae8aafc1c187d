"""Analyzer utilities for the elasticlunr-compatible search index.

This module keeps the composable tokenizer/filter design of a Whoosh-style
analyzer while reproducing, token for token, the normalization the client-side
runtime expects: split on whitespace and hyphens, lowercase, drop stopwords,
then strip suffixes with a small heuristic stemmer.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from decimal import Decimal
import math
import re
from typing import Any, Protocol


# Measured in UTF-8 bytes, like every length guard in this module.
MAX_WORD_LENGTH = 80

# Stage labels written into the serialized index; the client only reads them.
PIPELINE_LABELS: tuple[str, ...] = ("trimmer", "stopWordFilter", "stemmer")

# Unicode White_Space characters plus the hyphen. Unlike ``\s`` this leaves the
# information separators U+001C..U+001F inside tokens.
_SEPARATOR_PATTERN = re.compile(
    r"[\t\n\x0b\x0c\r \x85\xa0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\-]+"
)

# Shortest-form floats switch to e-notation outside this decimal exponent range.
_PLAIN_EXPONENTS = range(-4, 6)


@dataclass
class Token:
    """Represents a token emitted by analyzers."""

    text: str
    position: int

    def copy_with(self, **updates: Any) -> Token:
        data = {"text": self.text, "position": self.position}
        data.update(updates)
        return Token(**data)


class Tokenizer(Protocol):
    """Protocol implemented by tokenizers."""

    def __call__(self, text: str) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class WhitespaceHyphenTokenizer:
    """Splits on unicode whitespace and ``-`` and lowercases each word.

    Punctuation other than the hyphen stays inside the token. Words whose
    lowercased UTF-8 encoding exceeds ``max_length`` bytes are dropped, not
    truncated.
    """

    def __init__(self, max_length: int = MAX_WORD_LENGTH) -> None:
        self.max_length = max_length

    def __call__(self, text: str) -> Iterator[Token]:
        position = 0
        for raw in _SEPARATOR_PATTERN.split(text):
            word = raw.lower()
            if not word or byte_length(word) > self.max_length:
                continue
            yield Token(text=word, position=position)
            position += 1


STOP_WORDS: frozenset[str] = frozenset(
    {
        "",
        "a",
        "able",
        "about",
        "across",
        "after",
        "all",
        "almost",
        "also",
        "am",
        "among",
        "an",
        "and",
        "any",
        "are",
        "as",
        "at",
        "be",
        "because",
        "been",
        "but",
        "by",
        "can",
        "cannot",
        "could",
        "dear",
        "did",
        "do",
        "does",
        "either",
        "else",
        "ever",
        "every",
        "for",
        "from",
        "get",
        "got",
        "had",
        "has",
        "have",
        "he",
        "her",
        "hers",
        "him",
        "his",
        "how",
        "however",
        "i",
        "if",
        "in",
        "into",
        "is",
        "it",
        "its",
        "just",
        "least",
        "let",
        "like",
        "likely",
        "may",
        "me",
        "might",
        "most",
        "must",
        "my",
        "neither",
        "no",
        "nor",
        "not",
        "of",
        "off",
        "often",
        "on",
        "only",
        "or",
        "other",
        "our",
        "own",
        "rather",
        "said",
        "say",
        "says",
        "she",
        "should",
        "since",
        "so",
        "some",
        "than",
        "that",
        "the",
        "their",
        "them",
        "then",
        "there",
        "these",
        "they",
        "this",
        "tis",
        "to",
        "too",
        "twas",
        "us",
        "wants",
        "was",
        "we",
        "were",
        "what",
        "when",
        "where",
        "which",
        "while",
        "who",
        "whom",
        "why",
        "will",
        "with",
        "would",
        "yet",
        "you",
        "your",
    }
)

# (suffix, minimum length left after stripping), longest suffix first
_PLURAL_RULES: tuple[tuple[str, int], ...] = (
    ("ies", 3),
    ("es", 2),
    ("s", 1),
)

_DERIVATIONAL_SUFFIXES: tuple[str, ...] = (
    "tion",
    "sion",
    "ment",
    "ness",
    "ful",
    "less",
    "ity",
    "ous",
    "ive",
    "ent",
    "ant",
    "able",
    "ible",
    "ence",
    "ance",
)

_AGENTIVE_SUFFIXES: tuple[str, ...] = ("ly", "er", "est")


def is_stop_word(token: str) -> bool:
    """Exact match against the unstemmed, lowercased token."""
    return token in STOP_WORDS


def byte_length(text: str) -> int:
    """Length of ``text`` in UTF-8 bytes."""
    return len(text.encode("utf-8"))


def stem(word: str) -> str:
    """Strip common English suffixes in four ordered passes.

    This is a heuristic approximation of Porter stemming and intentionally
    under-stems some forms (``"runner's"`` is left alone because the trailing
    apostrophe defeats every rule). The client runtime was built against this
    exact behavior, so do not swap in a linguistically correct stemmer.

    Length guards count UTF-8 bytes, so ``"ñoed"`` (5 bytes) still loses its
    ``ed``. Every suffix is ASCII, which keeps character slicing equivalent.
    """
    if byte_length(word) <= 2:
        return word

    word = word.lower()

    for suffix, min_remaining in _PLURAL_RULES:
        if word.endswith(suffix) and byte_length(word) - len(suffix) > min_remaining:
            word = word[: -len(suffix)]
            break

    if word.endswith("ed") and byte_length(word) > 4:
        word = word[:-2]
    elif word.endswith("ing") and byte_length(word) > 5:
        word = word[:-3]

    word = _strip_first_suffix(word, _DERIVATIONAL_SUFFIXES)
    return _strip_first_suffix(word, _AGENTIVE_SUFFIXES)


def _strip_first_suffix(word: str, suffixes: Sequence[str]) -> str:
    for suffix in suffixes:
        if word.endswith(suffix) and byte_length(word) > len(suffix) + 2:
            return word[: -len(suffix)]
    return word


def tokenize(text: str) -> list[str]:
    """Return the lowercase word tokens of ``text``."""
    return [token.text for token in WhitespaceHyphenTokenizer()(text)]


def field_text(value: Any) -> str:
    """Canonical string form of a document field value before tokenization.

    Matches the default formatting the client's reference builder applies:
    ``None`` becomes ``"<nil>"`` (so a document without a reference is stored
    under that key), bools are lowercase, and floats use their shortest
    round-trip digits, switching to e-notation for large or tiny magnitudes.
    """
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    return str(value)


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"

    sign, digit_tuple, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    prefix = "-" if sign else ""
    if digits == "0":
        return prefix + "0"

    decimal_point = len(digits) + exponent
    scientific = decimal_point - 1
    if scientific not in _PLAIN_EXPONENTS:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        return f"{prefix}{mantissa}e{scientific:+03d}"
    if decimal_point <= 0:
        return f"{prefix}0.{'0' * -decimal_point}{digits}"
    if decimal_point >= len(digits):
        return prefix + digits + "0" * (decimal_point - len(digits))
    return f"{prefix}{digits[:decimal_point]}.{digits[decimal_point:]}"


class StopWordFilter:
    """Removes stopwords from the stream."""

    def __init__(self, stopwords: Iterable[str] | None = None) -> None:
        self.stopwords = frozenset(stopwords) if stopwords is not None else STOP_WORDS

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if token.text not in self.stopwords:
                yield token


class StemFilter:
    """Applies :func:`stem` and drops tokens that stem to nothing."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            stemmed = stem(token.text)
            if not stemmed:
                continue
            if stemmed == token.text:
                yield token
            else:
                yield token.copy_with(text=stemmed)


class AnalyzerPipeline:
    """Composable analyzer pipeline (tokenizer + filters)."""

    def __init__(self, tokenizer: Tokenizer, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer
        self.filters = list(filters or [])

    def __call__(self, text: str) -> list[Token]:
        stream: Iterable[Token] = self.tokenizer(text)
        for token_filter in self.filters:
            stream = token_filter(stream)
        tokens = list(stream)
        for idx, token in enumerate(tokens):  # normalize positions post-filtering
            token.position = idx
        return tokens


class ElasticlunrAnalyzer:
    """Default analyzer: tokenizer, stopword filter, stemmer."""

    def __init__(self, *, stopwords: Iterable[str] | None = None) -> None:
        self.pipeline = AnalyzerPipeline(
            WhitespaceHyphenTokenizer(),
            [StopWordFilter(stopwords), StemFilter()],
        )

    def __call__(self, text: str) -> list[Token]:
        return self.pipeline(text)
