"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mizreader.api.routes import missions, theaters
from mizreader.config import Settings, configure_logging, load_settings
from mizreader.services.projection import known_theaters

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        logger.info(
            "Serving missions from %s (%d known theaters)",
            settings.missions_dir, len(known_theaters()),
        )
        yield

    app = FastAPI(
        title="mizreader API",
        description="Read-only access to mission archives and theater projections",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(missions.router, prefix="/api")
    app.include_router(theaters.router, prefix="/api")

    @app.get("/api/health")
    async def health():
        return {
            "status": "ok",
            "missions_dir": str(app.state.settings.missions_dir),
            "missions_dir_exists": app.state.settings.missions_dir.is_dir(),
        }

    return app
