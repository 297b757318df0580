"""Main FastAPI application for the Range Pager API."""

import logging
from contextlib import asynccontextmanager
from typing import Dict, Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .errors import register_exception_handlers
from .helpers import PAGINATION_HEADERS, CurrentPaginationConfig
from .middleware import RequestLoggingMiddleware

def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format=settings.log_format
    )


configure_logging(get_settings())
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    logging.getLogger().setLevel(getattr(logging, settings.log_level))

    logger.info(f"Starting {settings.app_name}")
    yield
    logger.info(f"Shutting down {settings.app_name}")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Range-header pagination for collection endpoints",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    app.add_middleware(RequestLoggingMiddleware)

    # Pagination headers must be exposed for browsers to read them
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        expose_headers=PAGINATION_HEADERS,
    )

    register_exception_handlers(app)

    @app.get("/health", tags=["Health"])
    async def health_check(config: CurrentPaginationConfig) -> Dict[str, Any]:
        """Health check endpoint reporting the active pagination defaults."""
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": VERSION,
            "pagination": {
                "accept_ranges": list(config.accepted_sort_fields),
                "default_sort_field": config.default_sort_field,
                "default_max": config.default_max_limit,
                "max_ceiling": config.max_limit_ceiling
            }
        }

    @app.get("/live", tags=["Health"])
    async def liveness_check() -> Dict[str, str]:
        """Liveness check endpoint."""
        return {
            "status": "alive",
            "service": settings.app_name
        }

    @app.get("/", tags=["Root"])
    async def root() -> Dict[str, str]:
        """Root endpoint with API information."""
        return {
            "service": settings.app_name,
            "version": VERSION,
            "docs": "/docs",
            "health": "/health"
        }

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()

    uvicorn.run(
        "rangepager.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
