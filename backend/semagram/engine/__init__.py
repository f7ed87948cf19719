"""Semagram engine: seeded geometry, tokenization, composition."""

from semagram.engine.geometry import GraphemeGeometry, generate_geometry
from semagram.engine.rng import hash_to_seed, make_stream
from semagram.engine.tokenizer import normalize_key, split_clauses, tokenize

__all__ = [
    "GraphemeGeometry",
    "generate_geometry",
    "hash_to_seed",
    "make_stream",
    "normalize_key",
    "split_clauses",
    "tokenize",
]
