"""Phrase tokenization: lower-case alphanumeric runs minus stop-words."""

from __future__ import annotations

import re

# Alphanumeric runs; apostrophes only between characters ("don't", not "'cat'")
_WORD_RE = re.compile(r"[a-z0-9]+(?:'[a-z0-9]+)*")
_CLAUSE_SPLIT_RE = re.compile(r"\n+")

STOP_WORDS = frozenset({"the", "a", "an", "and", "or", "but", "is", "was", "am", "are"})


def normalize_key(word: str) -> str:
    """Case-folded, trimmed grapheme key."""
    return word.strip().casefold()


def tokenize(text: str) -> list[str]:
    """Ordered content words, duplicates kept.

    Falls back to the whole trimmed input as a single token when nothing
    survives stop-word removal, so geometry never gets zero words.
    """
    words = [w for w in _WORD_RE.findall(text.lower()) if w not in STOP_WORDS]
    if words:
        return words
    fallback = normalize_key(text)
    return [fallback] if fallback else []


def word_key(text: str) -> str | None:
    """Grapheme key for a single word, extracted the way ``tokenize`` does.

    None when ``text`` holds more than one word.
    """
    words = _WORD_RE.findall(text.lower())
    if len(words) > 1:
        return None
    if words:
        return words[0]
    return normalize_key(text) or None


def split_clauses(text: str) -> list[str]:
    """Newline-delimited clauses, trimmed, blanks dropped."""
    return [c.strip() for c in _CLAUSE_SPLIT_RE.split(text) if c.strip()]


def unit_count(word: str) -> int:
    """Alphanumeric character count of a word; drives spoke cardinality."""
    return sum(1 for ch in word if ch.isalnum()) or 1
