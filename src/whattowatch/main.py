# src/whattowatch/main.py
"""Main entry point for the WhatToWatch application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from whattowatch.api.v1 import (
    discovery_router,
    groups_router,
    matches_router,
    providers_router,
    swipes_router,
    tonight_router,
)
from whattowatch.core.logging_setup import setup_logging
from whattowatch.core.settings import settings
from whattowatch.db.session import create_tables
from whattowatch.services.catalog import get_catalog_client

setup_logging()
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="WhatToWatch API",
    description="Group movie and TV discovery with consensus matching",
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
app.include_router(discovery_router, prefix="/api/v1")
app.include_router(swipes_router, prefix="/api/v1")
app.include_router(matches_router, prefix="/api/v1")
app.include_router(tonight_router, prefix="/api/v1")
app.include_router(providers_router, prefix="/api/v1")
app.include_router(groups_router, prefix="/api/v1")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed requests as 400 with the field-level errors."""
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.on_event("startup")
async def on_startup() -> None:
    if settings.auto_create_tables:
        create_tables()
    if not settings.tmdb_access_token:
        logger.warning("TMDB_ACCESS_TOKEN is not set; catalog requests will be rejected")


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await get_catalog_client().close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Group movie and TV discovery with consensus matching",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("whattowatch.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
