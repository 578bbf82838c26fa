# src/whattowatch/api/v1/endpoints/discovery.py
"""Discovery feed endpoint."""

import logging

from fastapi import APIRouter, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from whattowatch.schemas.discovery import DiscoveryFilters, DiscoveryPage
from whattowatch.services.catalog import CatalogError
from whattowatch.services.discovery import run_discovery

from ..dependencies import CatalogDep, SessionDep

router = APIRouter(prefix="/discovery", tags=["discovery"])
logger = logging.getLogger(__name__)


@router.get("", response_model=DiscoveryPage)
async def get_discovery(
    request: Request,
    db: SessionDep,
    catalog: CatalogDep,
    group_id: str | None = Query(None, alias="groupId"),
    user_id: str | None = Query(None, alias="userId"),
) -> DiscoveryPage:
    """Return one page of the discovery feed.

    Filter options are read from the query string (see ``DiscoveryFilters``).
    ``groupId`` and ``userId`` give the group context used for provider
    availability and the family-liked feed.
    """
    try:
        filters = DiscoveryFilters.model_validate(dict(request.query_params))
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc

    try:
        return await run_discovery(
            db,
            catalog,
            filters,
            group_id=group_id,
            user_id=user_id,
        )
    except CatalogError as exc:
        logger.error("Discovery query failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc
