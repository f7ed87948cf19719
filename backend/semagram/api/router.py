"""Master API router: mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from semagram.api import graphemes, health, inspect, logogram

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(logogram.router)
api_router.include_router(graphemes.router)
api_router.include_router(inspect.router)
