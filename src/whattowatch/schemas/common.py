"""Shared Pydantic configuration for API models."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

MediaType = Literal["movie", "tv"]


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON while keeping snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        from_attributes=True,
    )


class StatusResponse(BaseModel):
    """Minimal acknowledgement body."""

    success: bool = True
