"""POST /api/inspect: read back a generated SVG."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from fastapi import APIRouter, HTTPException

from semagram.models.requests import InspectRequest
from semagram.models.responses import InspectLayer, InspectResponse
from semagram.svg.parser import parse_logogram, radial_extent

router = APIRouter()


@router.post("/inspect", response_model=InspectResponse)
async def inspect(req: InspectRequest) -> InspectResponse:
    try:
        parsed = parse_logogram(req.svg)
    except ET.ParseError as e:
        raise HTTPException(status_code=422, detail=f"Not well-formed SVG: {e}") from e

    return InspectResponse(
        mode=parsed.mode,
        layers=[
            InspectLayer(
                kind=layer.kind,
                key=layer.key,
                rotation=layer.rotation,
                scale=layer.scale,
                opacity=layer.opacity,
                path_count=len(layer.path_ds),
            )
            for layer in parsed.layers
        ],
        path_count=parsed.path_count,
        radial_extent=round(radial_extent(parsed.path_ds), 3),
    )
