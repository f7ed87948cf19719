"""POST /api/logogram: phrase → composed SVG logogram."""

from __future__ import annotations

import asyncio
import functools

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from semagram.dependencies import get_composer, get_logogram_archive, get_store
from semagram.engine.composer import Composer
from semagram.errors import StorageUnavailable
from semagram.models.requests import LogogramRequest
from semagram.models.responses import LayerPlacementOut, LogogramResponse
from semagram.service import LogogramResult, generate_logogram
from semagram.store.archive import ArchiveSink
from semagram.store.graphemes import GraphemeStore

router = APIRouter()


async def _generate(
    req: LogogramRequest,
    store: GraphemeStore,
    composer: Composer,
    archive: ArchiveSink,
) -> LogogramResult:
    # Store I/O may block on another request's in-flight creation; keep it off the loop
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(
            None, functools.partial(generate_logogram, req, store, composer, archive),
        )
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e)) from e


@router.post("/logogram", response_model=LogogramResponse)
async def logogram(
    req: LogogramRequest,
    store: GraphemeStore = Depends(get_store),
    composer: Composer = Depends(get_composer),
    archive: ArchiveSink = Depends(get_logogram_archive),
) -> LogogramResponse:
    result = await _generate(req, store, composer, archive)
    lg = result.logogram
    return LogogramResponse(
        svg=lg.svg_document,
        tokens=lg.tokens,
        grapheme_keys=lg.grapheme_keys,
        layout=[
            LayerPlacementOut(
                key=p.key,
                rotation=p.rotation,
                scale=p.scale,
                opacity=p.opacity,
                z_order=p.z_order,
                group=p.group,
            )
            for p in lg.layout
        ],
        archived=result.archived,
        archive_path=str(result.archive_path) if result.archive_path else None,
        composition_seed=lg.composition_seed,
    )


@router.post("/logogram/download")
async def download(
    req: LogogramRequest,
    store: GraphemeStore = Depends(get_store),
    composer: Composer = Depends(get_composer),
    archive: ArchiveSink = Depends(get_logogram_archive),
) -> Response:
    result = await _generate(req, store, composer, archive)
    return Response(
        content=result.logogram.svg_document,
        media_type="image/svg+xml",
        headers={"Content-Disposition": 'attachment; filename="semagram.svg"'},
    )
