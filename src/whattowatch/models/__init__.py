# src/whattowatch/models/__init__.py
"""SQLAlchemy models for the whattowatch application."""

from .group import GroupMember, WatchGroup
from .profile import Profile
from .provider import UserProvider
from .swipe import Swipe
from .tonight import TonightPick

__all__ = [
    "GroupMember", "WatchGroup",
    "Profile",
    "UserProvider",
    "Swipe",
    "TonightPick",
]
