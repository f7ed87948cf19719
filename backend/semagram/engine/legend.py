"""Human-readable mapping from semantic parameters to visual features."""

from __future__ import annotations

LEGEND: dict[str, str] = {
    "certainty": "Thicker strokes and heavier connectors; also shapes dash lengths.",
    "modality": "Arc sweep bias: obligation pulls segment start angles back, possibility pushes them forward.",
    "temporality": "More rings and more irregular spans (non-linear time); brighter connectors.",
    "agency": "Larger, more opaque center node and slightly more opaque arcs.",
    "perspective": "Global rotation per ring (1st none, 2nd +, 3rd -) and a halo around the center for 2nd/3rd.",
    "negation": "Dashed arcs with longer gaps.",
    "hypothetical": "Finer dash arrays; combined with negation gives a third dash profile.",
    "emphasis": "Overall stroke presence.",
    "composite": "Each clause is its own layer with a fixed rotation step and decaying scale and opacity.",
    "blend": "Two phrases overlaid with opposing rotations; the weight moves dominance between them.",
}
