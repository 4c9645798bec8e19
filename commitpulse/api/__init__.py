"""Commit Pulse REST API — FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from commitpulse import __version__
from commitpulse.api.deps import get_context
from commitpulse.api.errors import register_error_handlers
from commitpulse.api.middleware.request_id import RequestIDMiddleware
from commitpulse.api.routers import activity, config, execute, stats, status
from commitpulse.core.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    setup_logging()

    app = FastAPI(
        title="Commit Pulse",
        version=__version__,
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
    )

    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(get_context().settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health", tags=["ops"])
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok", "version": __version__})

    app.include_router(execute.router, prefix="/api/execute", tags=["execute"])
    app.include_router(status.router, prefix="/api/status", tags=["status"])
    app.include_router(stats.router, prefix="/api/stats", tags=["stats"])
    app.include_router(activity.router, prefix="/api/activity", tags=["activity"])
    app.include_router(config.router, prefix="/api/config", tags=["config"])

    return app
