"""FastAPI application for the outcome registry."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from outcome_registry import __version__
from outcome_registry.api.middleware import (
    REJECTED_RECORDS_HEADER,
    REQUEST_ID_HEADER,
    RequestLoggingMiddleware,
)
from outcome_registry.api.routes import analytics, health, instruments
from outcome_registry.config import get_settings
from outcome_registry.instruments import get_catalog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting outcome registry API")

    # Load the catalog once so a bad instrument file fails at startup
    catalog = get_catalog()
    logger.info(f"Instrument catalog loaded with {len(catalog)} instruments")

    yield

    # Shutdown
    logger.info("Shutting down outcome registry API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Outcome Registry API",
        description="Outcome registry analytics for leadership dashboards",
        version=__version__,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, REJECTED_RECORDS_HEADER, "X-Row-Count", "X-As-Of"],
    )

    # Add custom middleware
    app.add_middleware(RequestLoggingMiddleware)

    # Include routers
    app.include_router(health.router, tags=["health"])
    app.include_router(instruments.router, prefix="/api/v1", tags=["instruments"])
    app.include_router(analytics.router, prefix="/api/v1", tags=["analytics"])

    # Exception handlers
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        request_id = getattr(request.state, "request_id", None)
        logger.exception(f"[{request_id}] Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "request_id": request_id,
                "detail": str(exc) if settings.debug_mode else None,
            },
        )

    return app
