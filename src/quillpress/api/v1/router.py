"""Versioned API router wiring for v1.

This module composes the version 1 API surface by including the sub-routers
that define their own endpoints. It contains no endpoint definitions.
"""
from __future__ import annotations

from typing import Final

from fastapi import APIRouter

from .endpoints import auth_router, posts_router, users_router

# Single router for v1; sub-routers declare their own prefixes and tags
api_v1: Final[APIRouter] = APIRouter()
api_v1.include_router(auth_router)
api_v1.include_router(posts_router)
api_v1.include_router(users_router)

__all__ = ["api_v1"]
