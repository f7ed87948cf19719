"""/api/graphemes/*: per-word grapheme records, standalone SVGs, archival re-runs."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from semagram.dependencies import get_store
from semagram.engine.tokenizer import word_key
from semagram.errors import StorageUnavailable
from semagram.models.responses import ArchiveRunResponse, GraphemeResponse
from semagram.store.graphemes import GraphemeStore
from semagram.store.records import Grapheme
from semagram.svg.serializer import render_grapheme

router = APIRouter(prefix="/graphemes")


def _key_or_422(word: str) -> str:
    key = word_key(word)
    if key is None:
        raise HTTPException(status_code=422, detail=f"Expected a single word, got '{word}'")
    return key


def _to_response(g: Grapheme) -> GraphemeResponse:
    return GraphemeResponse(
        key=g.key,
        seed=g.seed,
        parameters=g.parameters,
        rings=g.geometry.ring_count,
        spokes=g.geometry.spokes,
        created_at=g.created_at,
    )


@router.post("/archive", response_model=ArchiveRunResponse)
async def archive_all(store: GraphemeStore = Depends(get_store)) -> ArchiveRunResponse:
    """Administrative re-run: archive every stored grapheme."""
    try:
        report = await asyncio.get_running_loop().run_in_executor(None, store.archive_all)
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    return ArchiveRunResponse(archived=report.archived, failed=report.failed)


@router.get("/{word}", response_model=GraphemeResponse)
async def get_grapheme(word: str, store: GraphemeStore = Depends(get_store)) -> GraphemeResponse:
    key = _key_or_422(word)
    try:
        g = await asyncio.get_running_loop().run_in_executor(None, store.get, key)
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    if g is None:
        raise HTTPException(status_code=404, detail=f"No grapheme for '{word}'")
    return _to_response(g)


@router.get("/{word}/svg")
async def get_grapheme_svg(word: str, store: GraphemeStore = Depends(get_store)) -> Response:
    """Standalone SVG; creates the grapheme with default parameters on first request."""
    key = _key_or_422(word)
    try:
        g = await asyncio.get_running_loop().run_in_executor(None, store.get_or_create, key)
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    return Response(content=render_grapheme(g.key, g.geometry), media_type="image/svg+xml")
