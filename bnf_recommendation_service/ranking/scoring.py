"""Scoring functions for related and trending recordings."""
from datetime import date, datetime

from bnf_recommendation_service.models.recording import Recording

# Relevance weights
TAG_WEIGHT = 3
MAX_SHARED_TAGS = 3
SPEAKER_WEIGHT = 4
MAX_SHARED_SPEAKERS = 2
SAME_EPISODE_BONUS = 6
SAME_LOCATION_BONUS = 2

# (max days since, bonus), checked in order
RELEVANCE_RECENCY_TIERS = ((90, 2), (180, 1))
TRENDING_RECENCY_TIERS = ((30, 10), (90, 7), (180, 4), (365, 2))

LIKE_WEIGHT = 3
FEATURED_BONUS = 3


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(later: date | datetime, earlier: date | datetime) -> int:
    """Whole days from `earlier` to `later` (negative if `earlier` is later)."""
    return (_as_date(later) - _as_date(earlier)).days


def _recency_bonus(days_since: int, tiers) -> int:
    for max_days, bonus in tiers:
        if days_since <= max_days:
            return bonus
    return 0


def shared_tag_count(anchor: Recording, candidate: Recording) -> int:
    """Number of tags both recordings carry."""
    return len(anchor.tags & candidate.tags)


def shared_speaker_count(anchor: Recording, candidate: Recording) -> int:
    """Number of speakers both recordings share, compared case-insensitively."""
    return len(anchor.speakers_lower & candidate.speakers_lower)


def same_episode(anchor: Recording, candidate: Recording) -> bool:
    """True when both recordings belong to the same non-empty episode."""
    return bool(anchor.episode) and bool(candidate.episode) and anchor.episode == candidate.episode


def relevance_score(anchor: Recording, candidate: Recording) -> int:
    """
    Score how related `candidate` is to `anchor`.

    Args:
        anchor: Recording the related list is built for
        candidate: Recording being scored

    Returns:
        Integer relevance score (higher is more related)
    """
    score = TAG_WEIGHT * min(shared_tag_count(anchor, candidate), MAX_SHARED_TAGS)
    score += SPEAKER_WEIGHT * min(shared_speaker_count(anchor, candidate), MAX_SHARED_SPEAKERS)

    if same_episode(anchor, candidate):
        score += SAME_EPISODE_BONUS

    if candidate.location == anchor.location:
        score += SAME_LOCATION_BONUS

    # Candidates newer than the anchor land in the most recent tier
    days_since = max(0, days_between(anchor.date, candidate.date))
    score += _recency_bonus(days_since, RELEVANCE_RECENCY_TIERS)

    return score


def trending_score(recording: Recording, like_count: int, now: date | datetime) -> int:
    """
    Score how much a recording is trending right now.

    Args:
        recording: Recording being scored
        like_count: Number of likes (non-negative)
        now: Reference point; only the calendar day is used

    Returns:
        Integer trending score
    """
    score = like_count * LIKE_WEIGHT

    days_since = days_between(now, recording.date)
    score += _recency_bonus(days_since, TRENDING_RECENCY_TIERS)

    if recording.feature_hero_thumbnail:
        score += FEATURED_BONUS

    return score
