"""Business logic services for the whattowatch application."""

from .catalog import CatalogClient, CatalogError, get_catalog_client, hydrate_titles
from .consensus import SwipeScore, calculate_match_score, rank_matches
from .discovery import get_discovery_feed, get_family_liked_feed
from .matches import list_group_matches

__all__ = [
    "CatalogClient",
    "CatalogError",
    "get_catalog_client",
    "hydrate_titles",
    "SwipeScore",
    "calculate_match_score",
    "rank_matches",
    "get_discovery_feed",
    "get_family_liked_feed",
    "list_group_matches",
]
