# src/whattowatch/api/v1/endpoints/swipes.py
"""Swipe, swiped-ids and watchlist endpoints."""

from typing import Literal

from fastapi import APIRouter, HTTPException, Query, status

from whattowatch.schemas.common import StatusResponse
from whattowatch.schemas.swipe import (
    SwipeCreate,
    SwipedKeysResponse,
    SwipeResponse,
    WatchlistItem,
)
from whattowatch.services.catalog import (
    TitleKey,
    display_title,
    hydrate_titles,
    poster_url,
    release_year,
)
from whattowatch.services.groups import UnknownReferenceError
from whattowatch.services.swipes import delete_swipe, swiped_keys, upsert_swipe, watchlist

from ..dependencies import CatalogDep, SessionDep

router = APIRouter(tags=["swipes"])


@router.post("/swipe", response_model=SwipeResponse)
async def record_swipe(swipe_data: SwipeCreate, db: SessionDep) -> SwipeResponse:
    """Record a rating; re-rating the same title replaces the earlier swipe."""
    try:
        swipe = upsert_swipe(
            db,
            user_id=swipe_data.user_id,
            group_id=swipe_data.group_id,
            movie_id=swipe_data.movie_id,
            media_type=swipe_data.media_type,
            score=swipe_data.score,
            status=swipe_data.status,
        )
    except UnknownReferenceError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return SwipeResponse.model_validate(swipe)


@router.delete("/swipe", response_model=StatusResponse)
async def remove_swipe(
    db: SessionDep,
    user_id: str = Query(..., alias="userId", min_length=1),
    movie_id: str = Query(..., alias="movieId", min_length=1),
    media_type: Literal["movie", "tv"] = Query("movie", alias="mediaType"),
) -> StatusResponse:
    """Remove a user's rating of a title."""
    delete_swipe(db, user_id=user_id, movie_id=movie_id, media_type=media_type)
    return StatusResponse()


@router.get("/swiped-ids", response_model=SwipedKeysResponse)
async def get_swiped_ids(
    db: SessionDep,
    user_id: str = Query(..., alias="userId", min_length=1),
    group_id: str | None = Query(None, alias="groupId"),
) -> SwipedKeysResponse:
    """List titles the user already rated so clients can skip them."""
    return SwipedKeysResponse(swiped_keys=swiped_keys(db, user_id, group_id))


@router.get("/watchlist", response_model=list[WatchlistItem])
async def get_watchlist(
    db: SessionDep,
    catalog: CatalogDep,
    user_id: str = Query(..., alias="userId", min_length=1),
    group_id: str = Query(..., alias="groupId", min_length=1),
) -> list[WatchlistItem]:
    """Return the user's liked titles with how many other members like them."""
    entries = watchlist(db, user_id, group_id)
    by_key = {TitleKey(e.movie_id, e.media_type): e for e in entries}
    hydrated = await hydrate_titles(catalog, by_key)

    items: list[WatchlistItem] = []
    for key, details in hydrated:
        entry = by_key[key]
        items.append(
            WatchlistItem(
                id=entry.movie_id,
                title=display_title(details),
                image=poster_url(details.get("poster_path")),
                year=release_year(details),
                media_type=entry.media_type,
                my_score=entry.my_score,
                status=entry.status,
                others_count=entry.others_count,
            )
        )
    return items
