"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from pantry_shopping.api.errors import register_exception_handlers
from pantry_shopping.api.ingredients import router as ingredients_router
from pantry_shopping.api.shopping import router as shopping_router
from pantry_shopping.app_logging import configure_logging
from pantry_shopping.config import parse_log_level
from pantry_shopping.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(parse_log_level(container.settings.log_level))
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Starting pantry shopping API (%s)",
            app.state.container.settings.environment,
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Pantry Shopping", lifespan=lifespan)
    app.state.container = container
    register_exception_handlers(app)

    app.include_router(shopping_router)
    app.include_router(ingredients_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
