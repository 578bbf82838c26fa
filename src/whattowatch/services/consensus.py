"""Group consensus rules for deciding when a title is a match.

Scores are ordinal and fixed:

    0 = nope (veto), 1 = maybe, 2 = want, 3 = must watch

A title matches a group only once every current member has rated it, nobody
vetoed it, and at least one member is enthusiastic (score >= 2). The match
score is the plain sum of member scores.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import IntEnum


class SwipeScore(IntEnum):
    """Numeric swipe vocabulary, ordered from least to most enthusiastic."""

    NOPE = 0
    MAYBE = 1
    WANT = 2
    MUST_WATCH = 3


# Gesture mapping used by swipe clients.
DIRECTION_TO_SCORE: dict[str, SwipeScore] = {
    "up": SwipeScore.MUST_WATCH,
    "right": SwipeScore.WANT,
    "down": SwipeScore.MAYBE,
    "left": SwipeScore.NOPE,
}

ENTHUSIASTIC_SCORE = SwipeScore.WANT


@dataclass(frozen=True)
class MemberSwipe:
    """One member's score for a single title."""

    user_id: str
    score: int


@dataclass(frozen=True)
class MatchCandidate:
    """Aggregated swipes for one title inside one group."""

    movie_id: str
    media_type: str
    swipes: tuple[MemberSwipe, ...]


@dataclass(frozen=True)
class RankedMatch:
    """A title that satisfied the consensus rule."""

    movie_id: str
    media_type: str
    score: int
    swipe_count: int


def calculate_match_score(
    swipes: Sequence[MemberSwipe], total_family_members: int
) -> int | None:
    """Return the group's match score for one title, or ``None`` for no verdict.

    Args:
        swipes: One entry per member who rated the title.
        total_family_members: Current group size.

    Returns:
        The sum of scores when the title matches; ``None`` when not everyone
        has rated it yet, somebody vetoed it, or nobody is enthusiastic.
    """
    if len(swipes) < total_family_members:
        return None

    scores = [int(swipe.score) for swipe in swipes]
    if any(score <= SwipeScore.NOPE for score in scores):
        return None
    if not any(score >= ENTHUSIASTIC_SCORE for score in scores):
        return None
    return sum(scores)


def rank_matches(
    candidates: Iterable[MatchCandidate], total_family_members: int
) -> list[RankedMatch]:
    """Evaluate every candidate and return matches ordered by descending score.

    Ties are broken by title id, then media type, so listings are reproducible.
    """
    matches: list[RankedMatch] = []
    for candidate in candidates:
        score = calculate_match_score(candidate.swipes, total_family_members)
        if score is None:
            continue
        matches.append(
            RankedMatch(
                movie_id=candidate.movie_id,
                media_type=candidate.media_type,
                score=score,
                swipe_count=len(candidate.swipes),
            )
        )
    matches.sort(key=lambda match: (-match.score, match.movie_id, match.media_type))
    return matches
