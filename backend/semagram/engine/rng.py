"""Seed derivation + seeded pseudo-random streams.

Every logical draw (one word, one composition pass) gets its own stream.
There is deliberately no module-level generator.
"""

from __future__ import annotations

_UINT32 = 0xFFFFFFFF

# 32-bit FNV-1a
_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619

_MULBERRY_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296


def _imul(a: int, b: int) -> int:
    """Low 32 bits of a 32x32 multiply (sign-agnostic)."""
    return (a * b) & _UINT32


def hash_to_seed(text: str) -> int:
    """FNV-1a over UTF-16 code units. Always returns a non-zero uint32."""
    h = _FNV_OFFSET
    data = text.encode("utf-16-le", errors="surrogatepass")
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = _imul(h, _FNV_PRIME)
    return h or 1


class Mulberry32:
    """mulberry32 generator. Calling the instance yields a float in [0, 1)."""

    __slots__ = ("_state", "draws")

    def __init__(self, seed: int) -> None:
        self._state = seed & _UINT32
        self.draws = 0

    def __call__(self) -> float:
        self._state = (self._state + _MULBERRY_INCREMENT) & _UINT32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _UINT32
        self.draws += 1
        return ((t ^ (t >> 14)) & _UINT32) / _TWO_POW_32


def make_stream(seed: int) -> Mulberry32:
    return Mulberry32(seed)


def seed_for(salt: str, key: str) -> int:
    """Seed for a salted key, e.g. ``seed_for("arrival", "cat")``."""
    return hash_to_seed(f"{salt}|{key}")
