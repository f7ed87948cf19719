"""Seeded procedural geometry: rings of arcs, radial connectors, a center node.

``generate_geometry`` is a pure function of (seed, parameters, unit_count).
All random choices come from one mulberry32 stream, drawn in this order:

  1. ring count jitter                      (1 draw)
  2. ring gap jitter                        (1 draw)
  3. for each ring, ascending:
       ring bias jitter                     (1 draw)
       for each spoke, ascending:
         span jitter, direction, opacity    (3 draws)
  4. for each adjacent ring pair, ascending:
       for each spoke, ascending:
         connector angle jitter             (1 draw)

Changing this order changes every stored grapheme. Don't.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any

from semagram.engine.rng import make_stream
from semagram.models.parameters import ParameterVector, Perspective
from semagram.utils.math_helpers import TAU, clamp, fmt, lerp, polar

MIN_RINGS = 3
MAX_RINGS = 7

# Prime-ish spoke counts, indexed by content size.
SPOKE_CANDIDATES = (7, 9, 11, 13, 17, 19)

RADIUS_BASE = 100.0
RING_GAP_MIN = 28.0
RING_GAP_JITTER = 6.0

STROKE_MIN = 0.8
STROKE_MAX = 7.0
RING_TAPER = 0.03

OPACITY_MIN = 0.45
OPACITY_MAX = 1.0

PERSPECTIVE_ROTATION = {
    Perspective.FIRST: 0.0,
    Perspective.SECOND: 0.12,
    Perspective.THIRD: -0.12,
}


@dataclass
class ArcSegment:
    d: str
    width: float
    opacity: float
    dash: str | None = None


@dataclass
class Connector:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float
    opacity: float


@dataclass
class CenterNode:
    radius: float
    opacity: float
    # Unfilled ring around the center; only for non-neutral perspective
    halo_radius: float | None = None
    halo_opacity: float = 0.18


@dataclass
class GraphemeGeometry:
    """Structured shape: rings[i][s] arcs, connectors[i][s] between ring i and i+1."""

    rings: list[list[ArcSegment]] = field(default_factory=list)
    connectors: list[list[Connector]] = field(default_factory=list)
    center: CenterNode = field(default_factory=lambda: CenterNode(radius=0.0, opacity=0.0))
    spokes: int = 0
    radius_base: float = RADIUS_BASE
    ring_gap: float = RING_GAP_MIN

    @property
    def ring_count(self) -> int:
        return len(self.rings)

    @property
    def outer_radius(self) -> float:
        return self.radius_base + (self.ring_count - 1) * self.ring_gap

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GraphemeGeometry:
        return cls(
            rings=[[ArcSegment(**seg) for seg in ring] for ring in data.get("rings", [])],
            connectors=[[Connector(**c) for c in ring] for ring in data.get("connectors", [])],
            center=CenterNode(**data["center"]),
            spokes=data.get("spokes", 0),
            radius_base=data.get("radius_base", RADIUS_BASE),
            ring_gap=data.get("ring_gap", RING_GAP_MIN),
        )


def choose_spokes(unit_count: int) -> int:
    idx = int(clamp(math.floor((unit_count - 3) / 3), 0, len(SPOKE_CANDIDATES) - 1))
    return SPOKE_CANDIDATES[idx]


def stroke_width(params: ParameterVector, ring_index: int) -> float:
    """Monotone in certainty and emphasis, tapering inward across rings."""
    w = lerp(1.2, 5.5, params.certainty) * lerp(0.8, 1.15, params.emphasis) * (1 - ring_index * RING_TAPER)
    return clamp(w, STROKE_MIN, STROKE_MAX)


def dash_pattern(params: ParameterVector) -> str | None:
    """Fixed lookup over (negation, hypothetical). None = solid stroke."""
    c = params.certainty
    if params.negation and params.hypothetical:
        return f"{lerp(2, 6, c):.1f} {lerp(1, 3, 1 - c):.1f}"
    if params.negation:
        return f"{lerp(4, 9, 1 - c):.1f} {lerp(2, 4, c):.1f}"
    if params.hypothetical:
        return f"{lerp(1.5, 4, 1 - c):.1f} {lerp(1, 3, c):.1f}"
    return None


def arc_path(cx: float, cy: float, r: float, a0: float, a1: float) -> str:
    x0, y0 = polar(cx, cy, r, a0)
    x1, y1 = polar(cx, cy, r, a1)
    large = 1 if abs(a1 - a0) > math.pi else 0
    sweep = 1 if a1 > a0 else 0
    return f"M {fmt(x0)} {fmt(y0)} A {fmt(r)} {fmt(r)} 0 {large} {sweep} {fmt(x1)} {fmt(y1)}"


def center_node(params: ParameterVector) -> CenterNode:
    node = CenterNode(
        radius=lerp(6, 16, params.agency),
        opacity=0.28 + params.agency * 0.35,
    )
    if params.perspective != Perspective.FIRST:
        node.halo_radius = lerp(12, 22, params.agency)
    return node


def generate_geometry(seed: int, params: ParameterVector, unit_count: int = 1) -> GraphemeGeometry:
    """Build the grapheme shape for ``seed``. Same inputs, same output, always."""
    rnd = make_stream(seed)

    rings = int(clamp(MIN_RINGS + math.floor(params.temporality * 3 + rnd() * 2), MIN_RINGS, MAX_RINGS))
    spokes = choose_spokes(max(unit_count, 1))
    ring_gap = RING_GAP_MIN + rnd() * RING_GAP_JITTER

    dash = dash_pattern(params)
    rotation = PERSPECTIVE_ROTATION[params.perspective]
    base_span = lerp(0.7, 1.55, params.temporality)
    jitter_scale = 0.25 + params.temporality * 0.35

    geometry = GraphemeGeometry(
        center=center_node(params),
        spokes=spokes,
        radius_base=RADIUS_BASE,
        ring_gap=ring_gap,
    )

    for i in range(rings):
        r = RADIUS_BASE + i * ring_gap
        # modality: obligation (negative) vs possibility (positive) sweep bias
        bias = lerp(-0.6, 0.6, params.modality) + (rnd() - 0.5) * 0.2
        width = stroke_width(params, i)
        ring: list[ArcSegment] = []

        for s in range(spokes):
            a0 = TAU * s / spokes + bias * 0.2
            span = base_span + (rnd() - 0.5) * jitter_scale
            direction = 1 if rnd() > 0.5 else -1
            a1 = a0 + span * direction
            opacity = 0.7 + (rnd() - 0.5) * 0.1 + (params.agency - 0.5) * 0.1

            ring.append(ArcSegment(
                d=arc_path(0.0, 0.0, r, a0 + rotation, a1 + rotation),
                width=width,
                opacity=clamp(opacity, OPACITY_MIN, OPACITY_MAX),
                dash=dash,
            ))

        geometry.rings.append(ring)

    conn_width = lerp(0.6, 2.2, params.certainty)
    conn_opacity = 0.25 + params.temporality * 0.25
    for i in range(rings - 1):
        r0 = RADIUS_BASE + i * ring_gap
        r1 = RADIUS_BASE + (i + 1) * ring_gap
        links: list[Connector] = []
        for s in range(spokes):
            a = TAU * s / spokes + (rnd() - 0.5) * 0.03
            x1, y1 = polar(0.0, 0.0, r0, a)
            x2, y2 = polar(0.0, 0.0, r1, a)
            links.append(Connector(
                x1=round(x1, 3), y1=round(y1, 3),
                x2=round(x2, 3), y2=round(y2, 3),
                width=conn_width,
                opacity=conn_opacity,
            ))
        geometry.connectors.append(links)

    return geometry
