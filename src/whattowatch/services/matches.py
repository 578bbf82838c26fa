"""Group match listing built on the consensus rules.

Matches are never stored. Each read collects the swipes of the group's
current members, buckets them per title and applies the consensus rule
against the current member count. Swipes left behind by former members are
ignored for both the count and the veto/sum.
"""
from __future__ import annotations

from collections import defaultdict

from sqlalchemy.orm import Session

from whattowatch.models import Swipe
from whattowatch.services.consensus import (
    MatchCandidate,
    MemberSwipe,
    RankedMatch,
    rank_matches,
)
from whattowatch.services.groups import current_member_ids


def collect_candidates(db: Session, group_id: str, member_ids: list[str]) -> list[MatchCandidate]:
    """Group the members' swipes in ``group_id`` into one candidate per title."""
    if not member_ids:
        return []

    rows = (
        db.query(Swipe.movie_id, Swipe.media_type, Swipe.user_id, Swipe.score)
        .filter(Swipe.group_id == group_id, Swipe.user_id.in_(member_ids))
        .all()
    )

    buckets: dict[tuple[str, str], list[MemberSwipe]] = defaultdict(list)
    for movie_id, media_type, user_id, score in rows:
        buckets[(movie_id, media_type)].append(MemberSwipe(user_id=user_id, score=score))

    return [
        MatchCandidate(movie_id=movie_id, media_type=media_type, swipes=tuple(swipes))
        for (movie_id, media_type), swipes in buckets.items()
    ]


def list_group_matches(db: Session, group_id: str) -> list[RankedMatch]:
    """Return the group's matches, best first."""
    member_ids = current_member_ids(db, group_id)
    candidates = collect_candidates(db, group_id, member_ids)
    return rank_matches(candidates, total_family_members=len(member_ids))
