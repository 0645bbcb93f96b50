"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from photobooth.api.errors import register_error_handlers
from photobooth.api.events import router as events_router
from photobooth.api.generation import router as generation_router
from photobooth.api.photos import router as photos_router
from photobooth.api.sessions import router as sessions_router
from photobooth.api.shares import router as shares_router
from photobooth.app_logging import configure_logging
from photobooth.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Starting photobooth API: environment=%s", container.settings.environment
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    register_error_handlers(app)

    app.include_router(generation_router)
    app.include_router(events_router)
    app.include_router(sessions_router)
    app.include_router(photos_router)
    app.include_router(shares_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
