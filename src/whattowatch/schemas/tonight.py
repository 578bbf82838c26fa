"""Tonight pick schemas."""

from pydantic import Field

from .common import CamelModel, MediaType


class TonightPickCreate(CamelModel):
    """Schema for picking a title for tonight."""

    user_id: str = Field(..., min_length=1)
    group_id: str = Field(..., min_length=1)
    movie_id: str = Field(..., min_length=1)
    media_type: MediaType = "movie"


class TonightPickResponse(CamelModel):
    """A hydrated tonight pick with the members who chose it."""

    id: str
    title: str
    image: str
    year: int
    media_type: MediaType
    overview: str
    rating: float
    picked_by: list[str]
    is_overlap: bool


class TonightResponse(CamelModel):
    """Active picks for a group; ``overlaps`` repeats the multi-member picks."""

    picks: list[TonightPickResponse]
    overlaps: list[TonightPickResponse]
    message: str | None = None
