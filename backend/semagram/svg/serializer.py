"""Write clean, standalone SVG from grapheme geometry and layer trees."""

from __future__ import annotations

from typing import Any
from xml.sax.saxutils import escape, quoteattr

from semagram.engine.geometry import GraphemeGeometry
from semagram.utils.math_helpers import fmt

SVG_NS = "http://www.w3.org/2000/svg"

# 640px canvas, 36px margin on each side, origin at the center
CANVAS_SIZE = 640
CANVAS_MARGIN = 36
BACKDROP_RADIUS = 320
BACKDROP_COLOR = "#0a0a0a"
INK_COLOR = "#fafafa"


def _view_box(size: float, margin: float) -> str:
    half = size / 2 + margin
    return f"{fmt(-half, 0)} {fmt(-half, 0)} {fmt(size + margin * 2, 0)} {fmt(size + margin * 2, 0)}"


def _render(elem: dict[str, Any], depth: int, lines: list[str]) -> None:
    indent = "  " * depth
    tag = elem.get("tag", "path")
    attrs = {k: v for k, v in elem.items() if k not in ("tag", "children", "text") and v is not None}
    attr_str = "".join(f" {k}={quoteattr(str(v))}" for k, v in attrs.items())
    children = elem.get("children") or []
    text = elem.get("text")

    if text is not None:
        lines.append(f"{indent}<{tag}{attr_str}>{escape(text)}</{tag}>")
    elif children:
        lines.append(f"{indent}<{tag}{attr_str}>")
        for child in children:
            _render(child, depth + 1, lines)
        lines.append(f"{indent}</{tag}>")
    else:
        lines.append(f"{indent}<{tag}{attr_str} />")


def serialize_svg(
    elements: list[dict[str, Any]],
    canvas_size: float = CANVAS_SIZE,
    margin: float = CANVAS_MARGIN,
    title: str = "",
    description: str = "",
    backdrop: bool = True,
) -> str:
    """Generate an SVG document (XML prologue + namespace) from element dicts.

    Each dict has a ``tag``, attribute keys, and optionally ``children``.
    Attribute values of None are skipped.
    """
    lines = [
        '<?xml version="1.0" encoding="UTF-8" standalone="no"?>',
        f'<svg xmlns="{SVG_NS}" viewBox="{_view_box(canvas_size, margin)}"'
        f' width="{fmt(canvas_size, 0)}" height="{fmt(canvas_size, 0)}" role="img">',
    ]

    if title:
        lines.append(f"  <title>{escape(title)}</title>")
    if description:
        lines.append(f"  <desc>{escape(description)}</desc>")

    if backdrop:
        lines.append(f'  <circle cx="0" cy="0" r="{BACKDROP_RADIUS}" fill="{BACKDROP_COLOR}" />')

    for elem in elements:
        _render(elem, 1, lines)

    lines.append("</svg>")
    return "\n".join(lines) + "\n"


def transform_attr(rotation: float = 0.0, scale: float = 1.0) -> str | None:
    """``rotate(deg) scale(s)``; None when both are identity."""
    parts: list[str] = []
    if rotation:
        parts.append(f"rotate({fmt(rotation)})")
    if scale != 1.0:
        parts.append(f"scale({fmt(scale)})")
    return " ".join(parts) or None


def grapheme_to_elements(geometry: GraphemeGeometry, color: str = INK_COLOR) -> list[dict[str, Any]]:
    """Connectors, then rings, then the center node. Index order throughout."""
    out: list[dict[str, Any]] = []

    for i, links in enumerate(geometry.connectors):
        out.append({
            "tag": "g",
            "class": "connectors",
            "data-ring": str(i),
            "opacity": fmt(links[0].opacity) if links else None,
            "children": [
                {
                    "tag": "line",
                    "x1": fmt(c.x1), "y1": fmt(c.y1),
                    "x2": fmt(c.x2), "y2": fmt(c.y2),
                    "stroke": color,
                    "stroke-width": fmt(c.width),
                    "stroke-linecap": "round",
                }
                for c in links
            ],
        })

    for i, ring in enumerate(geometry.rings):
        out.append({
            "tag": "g",
            "class": "ring",
            "data-ring": str(i),
            "children": [
                {
                    "tag": "path",
                    "d": seg.d,
                    "fill": "none",
                    "stroke": color,
                    "stroke-width": fmt(seg.width),
                    "stroke-linecap": "round",
                    "stroke-linejoin": "round",
                    "stroke-dasharray": seg.dash,
                    "opacity": fmt(seg.opacity),
                }
                for seg in ring
            ],
        })

    center = geometry.center
    node: list[dict[str, Any]] = [{
        "tag": "circle",
        "cx": "0", "cy": "0",
        "r": fmt(center.radius),
        "fill": color,
        "opacity": fmt(center.opacity),
    }]
    if center.halo_radius is not None:
        node.append({
            "tag": "circle",
            "cx": "0", "cy": "0",
            "r": fmt(center.halo_radius),
            "fill": "none",
            "stroke": color,
            "opacity": fmt(center.halo_opacity),
        })
    out.append({"tag": "g", "class": "center", "children": node})
    return out


def layer_group(
    children: list[dict[str, Any]],
    rotation: float = 0.0,
    scale: float = 1.0,
    opacity: float = 1.0,
    **attrs: Any,
) -> dict[str, Any]:
    """Wrap children in a transformed, semi-transparent <g>."""
    group: dict[str, Any] = {"tag": "g"}
    group.update({k.rstrip("_").replace("_", "-"): v for k, v in attrs.items()})
    group["transform"] = transform_attr(rotation, scale)
    group["opacity"] = fmt(opacity) if opacity != 1.0 else None
    group["children"] = children
    return group


def render_grapheme(key: str, geometry: GraphemeGeometry, backdrop: bool = True) -> str:
    """Standalone SVG for one word's grapheme."""
    return serialize_svg(
        [layer_group(grapheme_to_elements(geometry), class_="grapheme", data_key=key)],
        title=key,
        backdrop=backdrop,
    )
