"""Discovery query builder.

Turns a ``DiscoveryFilters`` value into catalog provider queries and merges
the answers into a single page. The union policies (age ratings, runtime
buckets) are plain functions so each can be exercised on its own.

Modes, in order of precedence:

1. search: a non-empty text query ignores every other filter
2. family liked: titles other members rated >= 2, paginated locally
3. trending: scope ``all`` without any active filter
4. discover: one faceted query per media type, interleaved for scope ``all``
"""

from __future__ import annotations

import asyncio
import calendar
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

from sqlalchemy.orm import Session

from whattowatch.core.settings import settings
from whattowatch.models import Swipe
from whattowatch.schemas.discovery import DEFAULT_SORT, DiscoveryFilters, DiscoveryPage
from whattowatch.services.catalog import CatalogClient, TitleKey, hydrate_titles
from whattowatch.services.consensus import ENTHUSIASTIC_SCORE
from whattowatch.services.groups import current_member_ids
from whattowatch.services.providers import resolve_available_providers

logger = logging.getLogger(__name__)

MOVIE_GENRES: dict[int, str] = {
    28: "Action", 12: "Adventure", 16: "Animation", 35: "Comedy",
    80: "Crime", 99: "Documentary", 18: "Drama", 10751: "Family",
    14: "Fantasy", 36: "History", 27: "Horror", 10402: "Music",
    9648: "Mystery", 10749: "Romance", 878: "Sci-Fi", 53: "Thriller",
    10752: "War", 37: "Western",
}

TV_GENRES: dict[int, str] = {
    10759: "Action", 16: "Animation", 35: "Comedy", 80: "Crime",
    99: "Documentary", 18: "Drama", 10751: "Family", 10762: "Kids",
    9648: "Mystery", 10764: "Reality", 10765: "Sci-Fi", 10766: "Soap",
    10767: "Talk", 10768: "War", 37: "Western",
}

ALL_AGES = "All Ages"

# label -> (movie certifications, tv certifications); empty means unrestricted.
AGE_RATINGS: dict[str, tuple[str, str]] = {
    ALL_AGES: ("", ""),
    "Family (G/PG)": ("G|PG", "TV-Y|TV-Y7|TV-G|TV-PG"),
    "Teen (PG-13)": ("G|PG|PG-13", "TV-Y|TV-Y7|TV-G|TV-PG|TV-14"),
    "Mature (R)": ("G|PG|PG-13|R", "TV-Y|TV-Y7|TV-G|TV-PG|TV-14|TV-MA"),
}
CERTIFICATION_COUNTRY = "US"


@dataclass(frozen=True)
class RuntimeBucket:
    label: str
    min_minutes: int | None
    max_minutes: int | None


# Ordered shortest to longest; adjacency is positional.
RUNTIME_BUCKETS: tuple[RuntimeBucket, ...] = (
    RuntimeBucket("<90", None, 90),
    RuntimeBucket("90-120", 90, 120),
    RuntimeBucket("2+ hours", 120, None),
)


@dataclass(frozen=True)
class RuntimeRange:
    min_minutes: int | None
    max_minutes: int | None


NEW_RELEASE_MONTHS = 6
CLASSIC_RELEASE_CUTOFF = "1999-12-31"
CLASSIC_MIN_RATING = 7.0
FREE_MONETIZATION_TYPES = "flatrate|free|ads"

NO_GROUP_MESSAGE = "Join or select a group to see what your family liked."
NO_FAMILY_LIKES_MESSAGE = "Nobody in your group has liked anything yet. Keep swiping!"


def resolve_genre_ids(labels: Sequence[str], media_type: str) -> str:
    """Map genre labels to the provider's ids for ``media_type``, comma-joined."""
    genre_map = MOVIE_GENRES if media_type == "movie" else TV_GENRES
    wanted = set(labels)
    ids = [str(genre_id) for genre_id, name in genre_map.items() if name in wanted]
    return ",".join(ids)


def union_certifications(labels: Sequence[str], media_type: str) -> str | None:
    """OR together the certification sets of every selected age-rating band.

    Returns ``None`` when nothing restricts the feed, which includes any
    selection containing the unrestricted band.
    """
    certifications: list[str] = []
    for label in labels:
        band = AGE_RATINGS.get(label)
        if band is None:
            logger.debug("Ignoring unknown age rating %r", label)
            continue
        certs = band[0] if media_type == "movie" else band[1]
        if not certs:
            return None
        for cert in certs.split("|"):
            if cert not in certifications:
                certifications.append(cert)
    return "|".join(certifications) or None


def runtime_range(labels: Sequence[str]) -> RuntimeRange | None:
    """Combine selected runtime buckets into a single range query.

    Contiguous buckets tighten to their covering min/max. A selection with a
    gap cannot be expressed as one range and widens to no filter at all, as
    does selecting every bucket or none.
    """
    selected = set(labels)
    positions = [
        index for index, bucket in enumerate(RUNTIME_BUCKETS) if bucket.label in selected
    ]
    if not positions or len(positions) == len(RUNTIME_BUCKETS):
        return None
    if positions[-1] - positions[0] + 1 != len(positions):
        return None

    low = RUNTIME_BUCKETS[positions[0]]
    high = RUNTIME_BUCKETS[positions[-1]]
    return RuntimeRange(min_minutes=low.min_minutes, max_minutes=high.max_minutes)


def has_active_filters(filters: DiscoveryFilters) -> bool:
    """Return True when any faceted option narrows the feed."""
    return any(
        (
            filters.genres,
            filters.age_rating,
            filters.min_rating is not None,
            filters.runtimes,
            filters.language,
            filters.new_releases,
            filters.is_classic,
            filters.is_free,
            filters.watch_providers,
            filters.sort_by != DEFAULT_SORT,
        )
    )


def months_before(today: date, months: int) -> date:
    """Return the same day ``months`` earlier, clamped to the month's length."""
    month_index = today.year * 12 + (today.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(today.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _format_number(value: float) -> str:
    return f"{value:g}"


def build_discover_params(
    filters: DiscoveryFilters,
    media_type: str,
    today: date | None = None,
) -> dict[str, str]:
    """Translate filters into discover query parameters for one media type."""
    date_field = "primary_release_date" if media_type == "movie" else "first_air_date"
    sort_by = filters.sort_by
    if media_type == "tv":
        sort_by = sort_by.replace("primary_release_date", "first_air_date")

    params: dict[str, str] = {
        "page": str(filters.page),
        "sort_by": sort_by,
        "include_adult": "false",
        "vote_count.gte": str(settings.discover_min_vote_count),
    }

    if filters.genres:
        genre_ids = resolve_genre_ids(filters.genres, media_type)
        if genre_ids:
            params["with_genres"] = genre_ids

    certifications = union_certifications(filters.age_rating, media_type)
    if certifications:
        params["certification_country"] = CERTIFICATION_COUNTRY
        params["certification"] = certifications

    min_rating = filters.min_rating
    if filters.is_classic:
        min_rating = max(min_rating or 0.0, CLASSIC_MIN_RATING)
    if min_rating is not None:
        params["vote_average.gte"] = _format_number(min_rating)

    if media_type == "movie":
        runtime = runtime_range(filters.runtimes)
        if runtime is not None:
            if runtime.min_minutes is not None:
                params["with_runtime.gte"] = str(runtime.min_minutes)
            if runtime.max_minutes is not None:
                params["with_runtime.lte"] = str(runtime.max_minutes)

    if filters.language:
        params["with_original_language"] = filters.language

    if filters.is_classic:
        params[f"{date_field}.lte"] = CLASSIC_RELEASE_CUTOFF
    elif filters.new_releases:
        since = months_before(today or date.today(), NEW_RELEASE_MONTHS)
        params[f"{date_field}.gte"] = since.isoformat()

    if filters.watch_providers:
        params["with_watch_providers"] = "|".join(str(p) for p in filters.watch_providers)
        params["watch_region"] = settings.watch_region

    if filters.is_free:
        params["with_watch_monetization_types"] = FREE_MONETIZATION_TYPES
        params["watch_region"] = settings.watch_region

    return params


def interleave(first: Sequence[Any], second: Sequence[Any]) -> list[Any]:
    """Alternate items from both sequences, appending the longer tail."""
    merged: list[Any] = []
    for index in range(max(len(first), len(second))):
        if index < len(first):
            merged.append(first[index])
        if index < len(second):
            merged.append(second[index])
    return merged


def _tag(results: Sequence[dict[str, Any]], media_type: str) -> list[dict[str, Any]]:
    return [{**result, "media_type": media_type} for result in results]


async def _discover(
    catalog: CatalogClient,
    filters: DiscoveryFilters,
    media_type: str,
    today: date | None,
) -> dict[str, Any]:
    params = build_discover_params(filters, media_type, today)
    return await catalog.discover(media_type, params)


async def get_discovery_feed(
    filters: DiscoveryFilters,
    catalog: CatalogClient,
    today: date | None = None,
) -> DiscoveryPage:
    """Return one page of the catalog feed for ``filters``.

    Raises:
        CatalogError: If the primary catalog query fails.
    """
    page = filters.page

    if filters.search_text:
        data = await catalog.search_multi(filters.search_text, page)
        results = [
            result
            for result in data.get("results") or []
            if result.get("media_type") in ("movie", "tv")
        ]
        return DiscoveryPage(
            results=results,
            page=int(data.get("page") or page),
            total_pages=int(data.get("total_pages") or 0),
        )

    active = has_active_filters(filters)
    if filters.type == "all" and not active:
        data = await catalog.trending(page)
        return DiscoveryPage(
            results=list(data.get("results") or []),
            page=int(data.get("page") or page),
            total_pages=int(data.get("total_pages") or 0),
        )

    if filters.type == "all":
        movie_data, tv_data = await asyncio.gather(
            _discover(catalog, filters, "movie", today),
            _discover(catalog, filters, "tv", today),
        )
        merged = interleave(
            _tag(movie_data.get("results") or [], "movie"),
            _tag(tv_data.get("results") or [], "tv"),
        )
        return DiscoveryPage(
            results=merged,
            page=page,
            total_pages=min(
                int(movie_data.get("total_pages") or 0),
                int(tv_data.get("total_pages") or 0),
            ),
        )

    data = await _discover(catalog, filters, filters.type, today)
    return DiscoveryPage(
        results=_tag(data.get("results") or [], filters.type),
        page=int(data.get("page") or page),
        total_pages=int(data.get("total_pages") or 0),
    )


def family_liked_keys(
    db: Session,
    group_id: str,
    user_id: str,
    liked_by_member: str | None = None,
) -> list[TitleKey]:
    """Return distinct titles other current members rated want or higher.

    Newest swipe first; a title liked by several members appears once.
    """
    members = current_member_ids(db, group_id)
    others = [member for member in members if member != user_id]
    if liked_by_member is not None:
        others = [member for member in others if member == liked_by_member]
    if not others:
        return []

    rows = (
        db.query(Swipe.movie_id, Swipe.media_type)
        .filter(
            Swipe.group_id == group_id,
            Swipe.user_id.in_(others),
            Swipe.score >= int(ENTHUSIASTIC_SCORE),
        )
        .order_by(Swipe.created_at.desc(), Swipe.movie_id)
        .all()
    )

    keys: list[TitleKey] = []
    seen: set[TitleKey] = set()
    for movie_id, media_type in rows:
        key = TitleKey(movie_id=movie_id, media_type=media_type)
        if key not in seen:
            seen.add(key)
            keys.append(key)
    return keys


async def get_family_liked_feed(
    db: Session,
    catalog: CatalogClient,
    filters: DiscoveryFilters,
    group_id: str | None,
    user_id: str | None,
) -> DiscoveryPage:
    """Page through titles the rest of the group already wants to watch."""
    page = filters.page
    if not group_id or not user_id:
        return DiscoveryPage(results=[], page=page, total_pages=0, message=NO_GROUP_MESSAGE)

    keys = family_liked_keys(db, group_id, user_id, filters.liked_by_member)
    if not keys:
        return DiscoveryPage(
            results=[], page=page, total_pages=0, message=NO_FAMILY_LIKES_MESSAGE
        )

    page_size = max(1, settings.family_liked_page_size)
    total_pages = math.ceil(len(keys) / page_size)
    start = (page - 1) * page_size
    page_keys = keys[start:start + page_size]

    hydrated = await hydrate_titles(catalog, page_keys)
    results = [
        {**details, "media_type": key.media_type} for key, details in hydrated
    ]
    return DiscoveryPage(results=results, page=page, total_pages=total_pages)


async def run_discovery(
    db: Session,
    catalog: CatalogClient,
    filters: DiscoveryFilters,
    *,
    group_id: str | None = None,
    user_id: str | None = None,
    today: date | None = None,
) -> DiscoveryPage:
    """Serve a discovery request in whichever mode ``filters`` selects.

    When scoped to a group and no explicit provider list was sent, the feed
    is restricted to services some member subscribes to.
    """
    if filters.family_liked and not filters.search_text:
        return await get_family_liked_feed(db, catalog, filters, group_id, user_id)

    if group_id and not filters.watch_providers and not filters.search_text:
        providers = resolve_available_providers(db, group_id)
        if providers:
            filters = filters.model_copy(update={"watch_providers": providers})

    return await get_discovery_feed(filters, catalog, today)
