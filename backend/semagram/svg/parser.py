"""Logogram parser: generic XML read-back of documents produced by the serializer.

ElementTree recovers the layer structure and the raw path ``d`` strings;
svgpathtools + numpy measure how far the arcs reach from the origin.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

import numpy as np
from svgpathtools import parse_path

from semagram.svg.serializer import SVG_NS

logger = logging.getLogger(__name__)

_NS = {"svg": SVG_NS}
_ROTATE_RE = re.compile(r"rotate\(\s*([-+\d.eE]+)")
_SCALE_RE = re.compile(r"scale\(\s*([-+\d.eE]+)")

# Layer-bearing <g> classes, outermost first
LAYER_CLASSES = ("clause", "phrase", "word", "grapheme")


@dataclass
class ParsedLayer:
    kind: str
    key: str | None = None
    rotation: float = 0.0
    scale: float = 1.0
    opacity: float = 1.0
    transform: str | None = None
    path_ds: list[str] = field(default_factory=list)
    children: list[ParsedLayer] = field(default_factory=list)


@dataclass
class ParsedLogogram:
    mode: str | None = None
    title: str = ""
    layers: list[ParsedLayer] = field(default_factory=list)
    path_ds: list[str] = field(default_factory=list)

    @property
    def path_count(self) -> int:
        return len(self.path_ds)


def _local(tag: str) -> str:
    return tag.split("}")[-1] if "}" in tag else tag


def _layer_from(elem: ET.Element) -> ParsedLayer:
    transform = elem.get("transform")
    rotation = scale = None
    if transform:
        if m := _ROTATE_RE.search(transform):
            rotation = float(m.group(1))
        if m := _SCALE_RE.search(transform):
            scale = float(m.group(1))

    layer = ParsedLayer(
        kind=elem.get("class", "g"),
        key=elem.get("data-key"),
        rotation=rotation if rotation is not None else 0.0,
        scale=scale if scale is not None else 1.0,
        opacity=float(elem.get("opacity", "1")),
        transform=transform,
        path_ds=[p.get("d", "") for p in elem.iter(f"{{{SVG_NS}}}path")],
    )
    for child in elem:
        if _local(child.tag) == "g" and child.get("class") in LAYER_CLASSES:
            layer.children.append(_layer_from(child))
    return layer


def _top_layers(elem: ET.Element) -> list[ParsedLayer]:
    """First layer-bearing groups below ``elem`` (does not descend into layers)."""
    layers: list[ParsedLayer] = []
    for child in elem:
        if _local(child.tag) != "g":
            continue
        if child.get("class") in LAYER_CLASSES:
            layers.append(_layer_from(child))
        else:
            layers.extend(_top_layers(child))
    return layers


def parse_logogram(svg_text: str) -> ParsedLogogram:
    """Parse an SVG string. Raises ET.ParseError on malformed XML."""
    root = ET.fromstring(svg_text.encode("utf-8"))
    parsed = ParsedLogogram()

    title = root.find("svg:title", _NS)
    if title is not None and title.text:
        parsed.title = title.text

    for g in root.iter(f"{{{SVG_NS}}}g"):
        if g.get("class") == "logogram":
            parsed.mode = g.get("data-mode")
            break

    parsed.layers = _top_layers(root)
    parsed.path_ds = [p.get("d", "") for p in root.iter(f"{{{SVG_NS}}}path")]
    logger.debug("Parsed logogram: %d layers, %d paths", len(parsed.layers), parsed.path_count)
    return parsed


def radial_extent(path_ds: list[str], samples: int = 16) -> float:
    """Largest distance from the origin reached by any sampled path point."""
    extent = 0.0
    for d in path_ds:
        try:
            path = parse_path(d)
        except Exception as e:
            logger.warning("Skipping unparseable path: %s", e)
            continue
        if len(path) == 0:
            continue
        pts = np.array([path.point(t) for t in np.linspace(0.0, 1.0, samples)])
        extent = max(extent, float(np.max(np.abs(pts))))
    return extent
