"""FastAPI application for the vital-log sync server."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from .. import __version__
from ..config import AppConfig, get_config
from ..store.engine import init_db
from .routers import collections, profile

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown."""
    config: AppConfig = app.state.config
    config.storage.data_dir.mkdir(parents=True, exist_ok=True)
    await init_db(config.storage.db_path)
    logger.info("sync_server_started", db_path=str(config.storage.db_path))
    yield


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="vital-log",
        description="Sync server for vital-log health history",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config or get_config()

    app.include_router(collections.router)
    app.include_router(profile.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app
