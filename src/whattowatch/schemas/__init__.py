"""
Pydantic schemas for API request/response models.

JSON bodies use camelCase field names; attributes stay snake_case.
"""

from .common import StatusResponse
from .discovery import DiscoveryFilters, DiscoveryPage
from .group import (
    GroupCreate,
    GroupJoin,
    GroupResponse,
    MemberResponse,
    MembershipResponse,
    ProfileResponse,
    ProfileUpdate,
)
from .match import MatchResponse
from .provider import ProviderSelection, ProvidersResponse
from .swipe import SwipeCreate, SwipedKeysResponse, SwipeResponse, WatchlistItem
from .tonight import TonightPickCreate, TonightPickResponse, TonightResponse

__all__ = [
    "StatusResponse",
    "DiscoveryFilters", "DiscoveryPage",
    "GroupCreate", "GroupJoin", "GroupResponse", "MemberResponse", "MembershipResponse",
    "ProfileResponse", "ProfileUpdate",
    "MatchResponse",
    "ProviderSelection", "ProvidersResponse",
    "SwipeCreate", "SwipedKeysResponse", "SwipeResponse", "WatchlistItem",
    "TonightPickCreate", "TonightPickResponse", "TonightResponse",
]
