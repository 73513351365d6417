"""
Main FastAPI application module.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from budgetvault.api.v1.router import api_router
from budgetvault.core.config import settings
from budgetvault.core.database import close_database
from budgetvault.core.db_init import init_db
from budgetvault.core.logging import setup_logging
from budgetvault.core.middleware import LoggingMiddleware, RequestIDMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handle application startup and shutdown events.
    """
    # Startup
    setup_logging()
    await init_db()

    yield

    # Shutdown
    await close_database()


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url="/api/docs" if not settings.is_production else None,
        redoc_url="/api/redoc" if not settings.is_production else None,
        openapi_url="/api/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Request IDs wrap the logging middleware so every request log carries one
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Include API routes
    app.include_router(api_router, prefix="/api/v1")

    return app


# Create the application instance
app = create_application()
