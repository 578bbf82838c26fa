# src/whattowatch/api/v1/endpoints/groups.py
"""Group directory endpoints: profiles, groups and membership."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from whattowatch.schemas.common import StatusResponse
from whattowatch.schemas.group import (
    GroupCreate,
    GroupJoin,
    GroupResponse,
    MemberResponse,
    MembershipResponse,
    ProfileResponse,
    ProfileUpdate,
)
from whattowatch.services.groups import (
    AlreadyMemberError,
    GroupNotFoundError,
    MembershipNotFoundError,
    ProfileNotFoundError,
    create_group,
    join_group,
    leave_group,
    list_members,
    list_memberships,
    upsert_profile,
)

from ..dependencies import SessionDep

router = APIRouter(tags=["groups"])


@router.put("/users/{user_id}", response_model=ProfileResponse)
async def update_profile(
    user_id: str,
    profile_data: ProfileUpdate,
    db: SessionDep,
) -> ProfileResponse:
    """Create or rename a user profile."""
    profile = upsert_profile(db, user_id, profile_data.display_name)
    return ProfileResponse.model_validate(profile)


@router.get("/groups", response_model=list[MembershipResponse])
async def get_memberships(
    db: SessionDep,
    user_id: str = Query(..., alias="userId", min_length=1),
) -> list[MembershipResponse]:
    """List the groups a user belongs to."""
    return [
        MembershipResponse(
            group=GroupResponse.model_validate(group),
            role=membership.role,
            joined_at=membership.joined_at,
        )
        for group, membership in list_memberships(db, user_id)
    ]


@router.post("/groups", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def post_group(group_data: GroupCreate, db: SessionDep) -> GroupResponse:
    """Create a group; the creator becomes its owner."""
    try:
        group = create_group(db, group_data.user_id, group_data.name)
    except ProfileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return GroupResponse.model_validate(group)


@router.post("/groups/join", response_model=GroupResponse)
async def post_join(join_data: GroupJoin, db: SessionDep) -> GroupResponse:
    """Join a group by invite code."""
    try:
        group = join_group(db, join_data.user_id, join_data.invite_code)
    except (ProfileNotFoundError, GroupNotFoundError) as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except AlreadyMemberError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return GroupResponse.model_validate(group)


@router.get("/groups/{group_id}/members", response_model=list[MemberResponse])
async def get_members(group_id: str, db: SessionDep) -> list[MemberResponse]:
    """List current members of a group."""
    try:
        rows = list_members(db, group_id)
    except GroupNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return [
        MemberResponse(id=profile.id, display_name=profile.display_name, role=member.role)
        for member, profile in rows
    ]


@router.delete("/groups/{group_id}/members/{user_id}", response_model=StatusResponse)
async def delete_member(group_id: str, user_id: str, db: SessionDep) -> StatusResponse:
    """Leave a group. The user's swipes stay on record."""
    try:
        leave_group(db, user_id, group_id)
    except MembershipNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return StatusResponse()
