"""Discovery request and response schemas."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_SORT = "popularity.desc"


def _split(value: Any, separator: str) -> Any:
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(separator) if part.strip())
    return value


class DiscoveryFilters(BaseModel):
    """Request-scoped discovery criteria.

    List-valued options arrive as delimited strings (``genres=Drama,Comedy``,
    ``watchProviders=8|337``) and are normalised to tuples.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    page: int = Field(default=1, ge=1)
    type: Literal["all", "movie", "tv"] = "all"
    genres: tuple[str, ...] = ()
    age_rating: tuple[str, ...] = ()
    min_rating: float | None = Field(default=None, ge=0, le=10)
    runtimes: tuple[str, ...] = ()
    language: str | None = None
    new_releases: bool = False
    sort_by: str = DEFAULT_SORT
    watch_providers: tuple[int, ...] = ()
    query: str | None = None
    is_free: bool = False
    is_classic: bool = False
    family_liked: bool = False
    liked_by_member: str | None = None

    @field_validator("genres", "age_rating", "runtimes", mode="before")
    @classmethod
    def _split_commas(cls, value: Any) -> Any:
        return _split(value, ",")

    @field_validator("watch_providers", mode="before")
    @classmethod
    def _split_pipes(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _split(value.replace(",", "|"), "|")
        return value

    @field_validator("min_rating", "language", "query", "liked_by_member", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("sort_by", mode="before")
    @classmethod
    def _default_sort(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_SORT
        return value

    @property
    def search_text(self) -> str:
        """Trimmed free-text query, empty when not in search mode."""
        return (self.query or "").strip()


class DiscoveryPage(BaseModel):
    """One page of a discovery feed."""

    results: list[dict[str, Any]]
    page: int
    total_pages: int
    message: str | None = None
