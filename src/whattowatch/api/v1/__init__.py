# src/whattowatch/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    discovery_router,
    groups_router,
    matches_router,
    providers_router,
    swipes_router,
    tonight_router,
)

__all__ = [
    "discovery_router",
    "swipes_router",
    "matches_router",
    "tonight_router",
    "providers_router",
    "groups_router",
]
