"""
FastAPI Application Entry Point.

GPS track logging server: mobile clients report positions, browsers view
tracks through the REST API mounted at settings.api_prefix.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from tracklog.app.core.config import settings
from tracklog.app.api.router import router as api_router
from tracklog.app.api.endpoints import legacy
from tracklog.app.core.observability import ObservabilityMiddleware
from tracklog.app.db.session import engine, Base
from tracklog.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from tracklog.app.models.user import User
from tracklog.app.models.track import Track
from tracklog.app.models.position import Position
from tracklog.app.models.config_entry import ConfigEntry, Layer

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    Creates missing database tables on startup.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    description="Self-hosted GPS track logging server",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
    }


app.include_router(api_router, prefix=settings.api_prefix)

# Form-encoded endpoint for older clients, outside the API prefix
app.include_router(legacy.router)


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Welcome to the Tracklog API",
        "docs": "/docs",
        "health": "/health",
        "api": settings.api_prefix,
    }
