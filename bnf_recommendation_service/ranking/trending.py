"""Trending recordings: a global ordering with a per-location diversity cap."""
import math
from collections import Counter
from datetime import date, datetime
from typing import Iterable, List, Mapping

from bnf_recommendation_service.models.recording import Recording, TrendingRecording
from bnf_recommendation_service.ranking.scoring import trending_score

DEFAULT_TRENDING_LIMIT = 6


def score_recordings(
        catalog: Iterable[Recording],
        like_counts: Mapping[str, int],
        now: date | datetime
) -> List[TrendingRecording]:
    """
    Score every recording and sort by trending score, newest first on ties.

    Args:
        catalog: Recordings to score
        like_counts: Likes per recording id (missing means zero)
        now: Reference point for recency

    Returns:
        All recordings, best first
    """
    scored = []
    for recording in catalog:
        like_count = like_counts.get(recording.id, 0)
        scored.append(TrendingRecording(
            recording=recording,
            like_count=like_count,
            trending_score=trending_score(recording, like_count, now)
        ))

    # Stable sort: date first, then score
    scored.sort(key=lambda t: t.recording.date, reverse=True)
    scored.sort(key=lambda t: t.trending_score, reverse=True)
    return scored


def location_cap(limit: int) -> int:
    """Most recordings one location may place during the diversity pass."""
    return math.ceil(limit / 2)


def trending_recordings(
        catalog: Iterable[Recording],
        like_counts: Mapping[str, int],
        now: date | datetime,
        limit: int = DEFAULT_TRENDING_LIMIT
) -> List[TrendingRecording]:
    """
    Select the top trending recordings.

    A diversity pass admits recordings in score order while each location
    stays under its cap; a backfill pass then tops up from the same order
    regardless of location.

    Args:
        catalog: All recordings
        like_counts: Likes per recording id (missing means zero)
        now: Reference point for recency
        limit: Maximum number of recordings to return

    Returns:
        Admitted recordings in admission order
    """
    if limit <= 0:
        return []

    scored = score_recordings(catalog, like_counts, now)
    cap = location_cap(limit)

    selected: List[TrendingRecording] = []
    selected_ids = set()
    per_location: Counter = Counter()

    for entry in scored:
        if len(selected) >= limit:
            break
        location = entry.recording.location
        if per_location[location] < cap:
            selected.append(entry)
            selected_ids.add(entry.recording.id)
            per_location[location] += 1

    for entry in scored:
        if len(selected) >= limit:
            break
        if entry.recording.id not in selected_ids:
            selected.append(entry)
            selected_ids.add(entry.recording.id)

    return selected
