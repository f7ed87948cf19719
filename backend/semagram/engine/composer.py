"""Phrase Composer: lays resolved word graphemes out into one logogram.

The visible logogram is literally an assembly of per-word grapheme shapes:
every content token contributes its own stored grapheme as one layer, so a
word looks the same in every phrase it appears in. Only placement (rotation,
scale, opacity, z-order) is decided here, and it never touches the store's
records.

Three modes:
  single     one phrase, one layer per token
  composite  one group per newline-delimited clause, index-based decay
  blend      two phrases, opposed rotations, linear dominance weight
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from semagram.engine.rng import hash_to_seed, make_stream
from semagram.engine.tokenizer import split_clauses, tokenize
from semagram.models.parameters import ParameterVector
from semagram.store.graphemes import GraphemeStore
from semagram.store.records import Grapheme
from semagram.svg.serializer import INK_COLOR, grapheme_to_elements, layer_group, serialize_svg
from semagram.utils.math_helpers import GOLDEN_ANGLE_DEG, clamp, lerp

logger = logging.getLogger(__name__)

# Word layers inside one phrase
WORD_ROTATION_STEP = GOLDEN_ANGLE_DEG
WORD_SCALE_DECAY = 0.12
WORD_SCALE_MIN = 0.35
WORD_OPACITY_DECAY = 0.08
WORD_OPACITY_MIN = 0.4

# Clause groups in composite mode
CLAUSE_ROTATION_STEP = 12.0
CLAUSE_SCALE_DECAY = 0.06
CLAUSE_SCALE_MIN = 0.3
CLAUSE_OPACITY_DECAY = 0.07
CLAUSE_OPACITY_MIN = 0.3

# Blend mode
BLEND_ROTATION = 15.0
BLEND_OPACITY_FLOOR = 0.35
BLEND_OPACITY_SPAN = 1.0 - BLEND_OPACITY_FLOOR
BLEND_COLORS = ("#e5e7eb", "#cbd5e1")

# Non-semantic rotation jitter, only with a pinned composition seed
JITTER_DEGREES = 6.0

# Light grays to tell composite layers apart
PALETTE = ("#fafafa", "#d1d5db", "#a3a3a3", "#e5e7eb", "#cbd5e1")


@dataclass
class LayerPlacement:
    """Where one token's grapheme sits inside the logogram."""

    key: str
    rotation: float
    scale: float
    opacity: float
    z_order: int
    color: str = INK_COLOR
    group: int = 0


@dataclass
class Logogram:
    """Rendered output of one phrase request. Immutable once produced."""

    phrase_text: str
    mode: str
    tokens: list[str]
    layout: list[LayerPlacement]
    svg_document: str
    created_at: float = 0.0
    composition_seed: str | None = None
    graphemes: dict[str, Grapheme] = field(default_factory=dict)

    @property
    def grapheme_keys(self) -> list[str]:
        return list(self.graphemes)


def word_placement(index: int) -> tuple[float, float, float]:
    """(rotation, scale, opacity) for the index-th token of a phrase."""
    return (
        index * WORD_ROTATION_STEP % 360.0,
        max(WORD_SCALE_MIN, 1.0 - index * WORD_SCALE_DECAY),
        max(WORD_OPACITY_MIN, 1.0 - index * WORD_OPACITY_DECAY),
    )


def clause_placement(index: int) -> tuple[float, float, float]:
    """(rotation, scale, opacity) for the index-th clause of a composite."""
    return (
        index * CLAUSE_ROTATION_STEP,
        max(CLAUSE_SCALE_MIN, 1.0 - index * CLAUSE_SCALE_DECAY),
        max(CLAUSE_OPACITY_MIN, 1.0 - index * CLAUSE_OPACITY_DECAY),
    )


def blend_opacities(weight: float) -> tuple[float, float]:
    """Linear: weight 0 → (1.0, 0.35), weight 1 → (0.35, 1.0)."""
    w = clamp(weight, 0.0, 1.0)
    return (1.0 - w * BLEND_OPACITY_SPAN, BLEND_OPACITY_FLOOR + w * BLEND_OPACITY_SPAN)


class Composer:
    """Resolves tokens through the store and composes the SVG."""

    def __init__(self, store: GraphemeStore, backdrop: bool = True) -> None:
        self.store = store
        self.backdrop = backdrop

    # -- resolution ---------------------------------------------------------

    def resolve(self, tokens: list[str], params: ParameterVector) -> dict[str, Grapheme]:
        """One grapheme per distinct token, in first-occurrence order."""
        resolved: dict[str, Grapheme] = {}
        for token in tokens:
            if token not in resolved:
                resolved[token] = self.store.get_or_create(token, params)
        return resolved

    # -- layout -------------------------------------------------------------

    @staticmethod
    def _jitter(composition_seed: str | None, phrase: str) -> Callable[[], float]:
        if composition_seed is None:
            return lambda: 0.0
        rnd = make_stream(hash_to_seed(f"{composition_seed}|{phrase}"))
        return lambda: (rnd() - 0.5) * JITTER_DEGREES

    def _word_layers(
        self,
        tokens: list[str],
        graphemes: dict[str, Grapheme],
        color: str,
        jitter: Callable[[], float],
        group: int = 0,
        z_offset: int = 0,
    ) -> tuple[list[LayerPlacement], list[dict[str, Any]]]:
        placements: list[LayerPlacement] = []
        elements: list[dict[str, Any]] = []

        for i, token in enumerate(tokens):
            rotation, scale, opacity = word_placement(i)
            rotation += jitter()
            placement = LayerPlacement(
                key=token,
                rotation=rotation,
                scale=scale,
                opacity=opacity,
                z_order=z_offset + i,
                color=color,
                group=group,
            )
            placements.append(placement)
            elements.append(layer_group(
                grapheme_to_elements(graphemes[token].geometry, color),
                rotation=rotation,
                scale=scale,
                opacity=opacity,
                class_="word",
                data_key=token,
            ))

        return placements, elements

    def _finish(
        self,
        phrase: str,
        mode: str,
        tokens: list[str],
        layout: list[LayerPlacement],
        elements: list[dict[str, Any]],
        graphemes: dict[str, Grapheme],
        composition_seed: str | None,
    ) -> Logogram:
        svg = serialize_svg(
            elements,
            title=phrase,
            description=" ".join(tokens),
            backdrop=self.backdrop,
        )
        logger.info("Composed %s logogram: %d tokens, %d layers", mode, len(tokens), len(layout))
        return Logogram(
            phrase_text=phrase,
            mode=mode,
            tokens=tokens,
            layout=layout,
            svg_document=svg,
            created_at=time.time(),
            composition_seed=composition_seed,
            graphemes=graphemes,
        )

    # -- modes --------------------------------------------------------------

    def compose_single(
        self,
        phrase: str,
        params: ParameterVector,
        composition_seed: str | None = None,
    ) -> Logogram:
        tokens = tokenize(phrase)
        graphemes = self.resolve(tokens, params)
        layout, layers = self._word_layers(
            tokens, graphemes, INK_COLOR, self._jitter(composition_seed, phrase),
        )
        elements = [{"tag": "g", "class": "logogram", "data-mode": "single", "children": layers}]
        return self._finish(phrase, "single", tokens, layout, elements, graphemes, composition_seed)

    def compose_composite(
        self,
        text: str,
        params: ParameterVector,
        composition_seed: str | None = None,
    ) -> Logogram:
        clauses = split_clauses(text) or [text]
        tokens: list[str] = []
        layout: list[LayerPlacement] = []
        graphemes: dict[str, Grapheme] = {}
        groups: list[dict[str, Any]] = []

        for i, clause in enumerate(clauses):
            clause_tokens = tokenize(clause)
            for key, grapheme in self.resolve(clause_tokens, params).items():
                graphemes.setdefault(key, grapheme)

            color = PALETTE[i % len(PALETTE)]
            placements, layers = self._word_layers(
                clause_tokens, graphemes, color,
                self._jitter(composition_seed, clause), group=i, z_offset=len(layout),
            )
            rotation, scale, opacity = clause_placement(i)
            groups.append(layer_group(
                layers,
                rotation=rotation,
                scale=scale,
                opacity=opacity,
                class_="clause",
                data_index=str(i),
            ))
            tokens.extend(clause_tokens)
            layout.extend(placements)

        elements = [{"tag": "g", "class": "logogram", "data-mode": "composite", "children": groups}]
        return self._finish(text, "composite", tokens, layout, elements, graphemes, composition_seed)

    def compose_blend(
        self,
        phrase_a: str,
        params_a: ParameterVector,
        phrase_b: str,
        params_b: ParameterVector,
        weight: float = 0.5,
        composition_seed: str | None = None,
    ) -> Logogram:
        w = clamp(weight, 0.0, 1.0)
        opacity_a, opacity_b = blend_opacities(w)
        tokens_a = tokenize(phrase_a)
        tokens_b = tokenize(phrase_b)

        graphemes = self.resolve(tokens_a, params_a)
        for key, grapheme in self.resolve(tokens_b, params_b).items():
            graphemes.setdefault(key, grapheme)

        layout_a, layers_a = self._word_layers(
            tokens_a, graphemes, BLEND_COLORS[0], self._jitter(composition_seed, phrase_a), group=0,
        )
        layout_b, layers_b = self._word_layers(
            tokens_b, graphemes, BLEND_COLORS[1], self._jitter(composition_seed, phrase_b), group=1, z_offset=len(tokens_a),
        )

        agency = lerp(params_a.agency, params_b.agency, w)
        indicator = {
            "tag": "circle",
            "class": "blend-center",
            "cx": "0", "cy": "0",
            "r": f"{lerp(8, 18, agency):.3f}",
            "fill": INK_COLOR,
            "opacity": f"{0.25 + w * 0.35:.3f}",
        }

        elements = [{
            "tag": "g",
            "class": "logogram",
            "data-mode": "blend",
            "data-weight": f"{w:.3f}",
            "children": [
                layer_group(layers_a, rotation=-BLEND_ROTATION, opacity=opacity_a, class_="phrase", data_index="0"),
                layer_group(layers_b, rotation=BLEND_ROTATION, opacity=opacity_b, class_="phrase", data_index="1"),
                indicator,
            ],
        }]
        phrase = f"{phrase_a}\n{phrase_b}"
        return self._finish(phrase, "blend", tokens_a + tokens_b, layout_a + layout_b, elements, graphemes, composition_seed)
