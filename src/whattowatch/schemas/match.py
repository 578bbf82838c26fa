"""Match listing schemas."""

from .common import CamelModel, MediaType


class MatchResponse(CamelModel):
    """One ranked group match, hydrated with catalog details."""

    id: str
    title: str
    image: str
    score: int
    swipe_count: int
    media_type: MediaType
    year: int
