# src/cookbook/main.py
"""Main entry point for the Cookbook application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from cookbook.api.v1 import (
    activity_router,
    categories_router,
    favorites_router,
    ingredients_router,
    recipes_router,
)
from cookbook.core.errors import CookbookError
from cookbook.core.settings import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Cookbook API",
    description="Recipe catalog with shared ingredients, categories, votes and clicks",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(recipes_router, prefix="/api/v1")
app.include_router(activity_router, prefix="/api/v1")
app.include_router(ingredients_router, prefix="/api/v1")
app.include_router(categories_router, prefix="/api/v1")
app.include_router(favorites_router, prefix="/api/v1")


@app.exception_handler(CookbookError)
async def cookbook_error_handler(request: Request, exc: CookbookError) -> JSONResponse:
    """Render service errors as JSON with their mapped status code."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Cookbook API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("cookbook.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
