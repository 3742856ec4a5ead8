"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quotecraft_api import __version__
from quotecraft_api.config import Settings, get_settings
from quotecraft_api.errors.handlers import register_exception_handlers
from quotecraft_api.middleware.request_context import RequestContextMiddleware
from quotecraft_api.routes import (
    account_router,
    auth_router,
    health_router,
    quotes_router,
    statistics_router,
)
from quotecraft_api.storage import build_store

# Configure logging
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Handles startup and shutdown events:
    - Startup: Build the quote store once and share it with every request
    - Shutdown: Close the store
    """
    settings: Settings = app.state.settings
    logger.info("Starting QuoteCraft API v%s in %s mode", __version__, settings.api_env.value)

    app.state.store = await build_store(settings)

    yield

    logger.info("Shutting down QuoteCraft API")
    await app.state.store.close()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="QuoteCraft API",
        description=(
            "Create, style and send price quotes to clients.\n\n"
            "## Features\n"
            "- Quote lifecycle: draft, sent (pending), approved, rejected\n"
            f"- Monthly quota of {settings.monthly_quote_limit} quotes per user\n"
            "- Dashboard statistics\n\n"
            "## Authentication\n"
            "Register at `/v1/auth/register` and send the returned API key in the "
            "`X-API-Key` header."
        ),
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Quota-Limit", "X-Quota-Reset"],
    )

    app.add_middleware(RequestContextMiddleware)  # type: ignore[arg-type]

    # Register exception handlers
    register_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(quotes_router, prefix=settings.api_prefix)
    app.include_router(statistics_router, prefix=settings.api_prefix)
    app.include_router(account_router, prefix=settings.api_prefix)

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "quotecraft_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_env.value == "development",
    )
