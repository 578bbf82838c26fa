"""Group and profile schemas."""

from datetime import datetime

from pydantic import Field

from .common import CamelModel


class ProfileUpdate(CamelModel):
    """Schema for creating or renaming a profile."""

    display_name: str | None = Field(None, max_length=80)


class ProfileResponse(CamelModel):
    id: str
    display_name: str | None


class GroupCreate(CamelModel):
    """Schema for creating a new group."""

    user_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=80)


class GroupJoin(CamelModel):
    """Schema for joining a group with an invite code."""

    user_id: str = Field(..., min_length=1)
    invite_code: str = Field(..., min_length=1, max_length=16)


class GroupResponse(CamelModel):
    """Schema for group information returned by the API."""

    id: str
    name: str
    invite_code: str
    created_at: datetime


class MembershipResponse(CamelModel):
    group: GroupResponse
    role: str
    joined_at: datetime


class MemberResponse(CamelModel):
    id: str
    display_name: str | None
    role: str
