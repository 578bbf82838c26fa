# src/whattowatch/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .discovery import router as discovery_router
from .groups import router as groups_router
from .matches import router as matches_router
from .providers import router as providers_router
from .swipes import router as swipes_router
from .tonight import router as tonight_router

__all__ = [
    "discovery_router",
    "swipes_router",
    "matches_router",
    "tonight_router",
    "providers_router",
    "groups_router",
]
