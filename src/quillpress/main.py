# src/quillpress/main.py
"""Main entry point for the QuillPress application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from quillpress.api.v1.router import api_v1
from quillpress.core.errors import install_exception_handlers
from quillpress.core.logging import configure_logging
from quillpress.core.settings import settings

logger = logging.getLogger(__name__)

configure_logging(settings.log_level)

# Initialize FastAPI app
app = FastAPI(
    title="QuillPress API",
    description="Blogging platform: accounts, drafts and publishing, follows and reactions",
    version=settings.app_version,
)

# Add CORS middleware; credentials are required for the session cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

install_exception_handlers(app)

# Include API routers
app.include_router(api_v1, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    logger.info(
        "%s %s starting (env=%s)",
        settings.app_name,
        settings.app_version,
        settings.app_env,
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "QuillPress API",
        "version": settings.app_version,
        "description": "Blog API is running",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("quillpress.main:app", host="0.0.0.0", port=8000, reload=not settings.is_production)
