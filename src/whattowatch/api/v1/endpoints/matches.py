# src/whattowatch/api/v1/endpoints/matches.py
"""Group match listing endpoint."""

from fastapi import APIRouter, Query

from whattowatch.schemas.match import MatchResponse
from whattowatch.services.catalog import (
    TitleKey,
    display_title,
    hydrate_titles,
    poster_url,
    release_year,
)
from whattowatch.services.matches import list_group_matches

from ..dependencies import CatalogDep, SessionDep

router = APIRouter(prefix="/matches", tags=["matches"])


@router.get("", response_model=list[MatchResponse])
async def get_matches(
    db: SessionDep,
    catalog: CatalogDep,
    group_id: str | None = Query(None, alias="groupId"),
) -> list[MatchResponse]:
    """Return the group's matches ranked by descending score.

    Without a group there is nothing to aggregate and the list is empty.
    Titles the catalog cannot resolve are left out.
    """
    if not group_id:
        return []

    ranked = list_group_matches(db, group_id)
    by_key = {TitleKey(match.movie_id, match.media_type): match for match in ranked}
    hydrated = await hydrate_titles(catalog, by_key)

    return [
        MatchResponse(
            id=key.movie_id,
            title=display_title(details),
            image=poster_url(details.get("poster_path")),
            score=by_key[key].score,
            swipe_count=by_key[key].swipe_count,
            media_type=key.media_type,
            year=release_year(details),
        )
        for key, details in hydrated
    ]
