# src/whattowatch/api/v1/endpoints/tonight.py
"""Tonight picks endpoints."""

from typing import Literal

from fastapi import APIRouter, HTTPException, Query, status

from whattowatch.schemas.common import StatusResponse
from whattowatch.schemas.tonight import (
    TonightPickCreate,
    TonightPickResponse,
    TonightResponse,
)
from whattowatch.services.catalog import (
    TitleKey,
    display_title,
    hydrate_titles,
    poster_url,
    release_year,
)
from whattowatch.services.groups import UnknownReferenceError
from whattowatch.services.tonight import active_picks, add_pick, group_picks, remove_pick

from ..dependencies import CatalogDep, SessionDep

router = APIRouter(prefix="/tonight", tags=["tonight"])

NO_GROUP_MESSAGE = "Select a group to see tonight's picks."


@router.get("", response_model=TonightResponse)
async def get_tonight(
    db: SessionDep,
    catalog: CatalogDep,
    group_id: str | None = Query(None, alias="groupId"),
) -> TonightResponse:
    """Return the group's active picks, with multi-member picks repeated under ``overlaps``."""
    if not group_id:
        return TonightResponse(picks=[], overlaps=[], message=NO_GROUP_MESSAGE)

    grouped = group_picks(active_picks(db, group_id))
    by_key = {TitleKey(entry.movie_id, entry.media_type): entry for entry in grouped}
    hydrated = await hydrate_titles(catalog, by_key)

    picks: list[TonightPickResponse] = []
    for key, details in hydrated:
        entry = by_key[key]
        picks.append(
            TonightPickResponse(
                id=key.movie_id,
                title=display_title(details),
                image=poster_url(details.get("poster_path")),
                year=release_year(details),
                media_type=key.media_type,
                overview=details.get("overview") or "",
                rating=float(details.get("vote_average") or 0),
                picked_by=list(entry.user_ids),
                is_overlap=entry.is_overlap,
            )
        )

    return TonightResponse(picks=picks, overlaps=[pick for pick in picks if pick.is_overlap])


@router.post("", response_model=StatusResponse)
async def pick_for_tonight(pick_data: TonightPickCreate, db: SessionDep) -> StatusResponse:
    """Pick a title for tonight, clearing the user's expired picks first."""
    try:
        add_pick(
            db,
            user_id=pick_data.user_id,
            group_id=pick_data.group_id,
            movie_id=pick_data.movie_id,
            media_type=pick_data.media_type,
        )
    except UnknownReferenceError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return StatusResponse()


@router.delete("", response_model=StatusResponse)
async def unpick_for_tonight(
    db: SessionDep,
    user_id: str = Query(..., alias="userId", min_length=1),
    movie_id: str = Query(..., alias="movieId", min_length=1),
    media_type: Literal["movie", "tv"] = Query("movie", alias="mediaType"),
) -> StatusResponse:
    """Withdraw a tonight pick."""
    remove_pick(db, user_id=user_id, movie_id=movie_id, media_type=media_type)
    return StatusResponse()
