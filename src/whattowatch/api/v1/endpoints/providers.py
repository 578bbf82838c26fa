# src/whattowatch/api/v1/endpoints/providers.py
"""Streaming provider endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Query, status

from whattowatch.schemas.common import StatusResponse
from whattowatch.schemas.provider import ProviderSelection, ProvidersResponse
from whattowatch.services.catalog import CatalogError
from whattowatch.services.groups import ProfileNotFoundError
from whattowatch.services.providers import (
    group_provider_ids,
    set_user_providers,
    user_provider_ids,
)

from ..dependencies import CatalogDep, SessionDep

router = APIRouter(prefix="/providers", tags=["providers"])
logger = logging.getLogger(__name__)


@router.get("", response_model=ProvidersResponse)
async def get_providers(
    db: SessionDep,
    catalog: CatalogDep,
    group_id: str | None = Query(None, alias="groupId"),
    user_id: str | None = Query(None, alias="userId"),
) -> ProvidersResponse:
    """List regional streaming services and the ones already selected.

    For a group, ``selected`` is every service any current member has.
    """
    try:
        providers = await catalog.list_watch_providers()
    except CatalogError as exc:
        logger.error("Providers API error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch providers",
        ) from exc

    selected: list[int] = []
    if group_id:
        selected = group_provider_ids(db, group_id)
    elif user_id:
        selected = user_provider_ids(db, user_id)
    return ProvidersResponse(providers=providers, selected=selected)


@router.post("", response_model=StatusResponse)
async def save_providers(selection: ProviderSelection, db: SessionDep) -> StatusResponse:
    """Replace the user's streaming subscriptions."""
    try:
        set_user_providers(db, selection.user_id, selection.provider_ids)
    except ProfileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return StatusResponse()
