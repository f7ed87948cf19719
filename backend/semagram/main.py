"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from semagram.config import settings

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.semagram_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Semagram",
        description="Deterministic word graphemes composed into vector logograms",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from semagram.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()


def serve() -> None:
    """Console entry point: run the API under uvicorn."""
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.semagram_log_level)
