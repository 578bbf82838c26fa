"""Swipe-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from .common import CamelModel, MediaType


class SwipeCreate(CamelModel):
    """Schema for recording or replacing a rating."""

    user_id: str = Field(..., min_length=1)
    group_id: str = Field(..., min_length=1)
    movie_id: str = Field(..., min_length=1)
    media_type: MediaType = "movie"
    score: Literal[0, 1, 2, 3] = Field(
        ..., description="0 nope, 1 maybe, 2 want, 3 must watch"
    )
    status: Literal["swiped", "watching", "watched"] = "swiped"


class SwipeResponse(CamelModel):
    """Stored state of a swipe after an upsert."""

    id: str
    user_id: str
    group_id: str
    movie_id: str
    media_type: MediaType
    score: int
    status: str
    created_at: datetime


class SwipedKeysResponse(CamelModel):
    """Titles a user already rated, as ``<movieId>_<mediaType>`` keys."""

    swiped_keys: list[str]


class WatchlistItem(CamelModel):
    """A hydrated watchlist row."""

    id: str
    title: str
    image: str
    year: int
    media_type: MediaType
    my_score: int
    status: str
    others_count: int
