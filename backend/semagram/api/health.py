"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from semagram.dependencies import get_store
from semagram.engine.legend import LEGEND
from semagram.models.responses import HealthResponse
from semagram.store.graphemes import GraphemeStore

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(store: GraphemeStore = Depends(get_store)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        graphemes_created=store.created_count,
    )


@router.get("/legend")
async def legend() -> dict[str, str]:
    return LEGEND
