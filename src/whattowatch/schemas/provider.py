"""Streaming provider schemas."""

from typing import Any

from pydantic import Field

from .common import CamelModel


class ProvidersResponse(CamelModel):
    """Catalog providers plus the ids the group can already watch on."""

    providers: list[dict[str, Any]]
    selected: list[int]


class ProviderSelection(CamelModel):
    """Replace one user's streaming subscriptions."""

    user_id: str = Field(..., min_length=1)
    provider_ids: list[int]
