"""Math helpers: lerp, clamp, polar coordinates. No engine imports."""

from __future__ import annotations

import math

TAU = math.pi * 2

# Golden angle in degrees, spreads successive word layers evenly.
GOLDEN_ANGLE_DEG = 180.0 * (3.0 - math.sqrt(5.0))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def clamp(n: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, n))


def polar(cx: float, cy: float, r: float, angle: float) -> tuple[float, float]:
    """Point at radius ``r`` and ``angle`` (radians) around (cx, cy)."""
    return (cx + r * math.cos(angle), cy + r * math.sin(angle))


def fmt(value: float, digits: int = 3) -> str:
    """Fixed-precision number for SVG attributes. Avoids "-0.000"."""
    text = f"{value:.{digits}f}"
    if text.startswith("-") and float(text) == 0.0:
        text = text[1:]
    return text
