"""Related recordings: a small, diverse list of recordings similar to an anchor."""
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from bnf_recommendation_service.models.recording import Recording
from bnf_recommendation_service.ranking.scoring import (
    relevance_score,
    same_episode,
    shared_speaker_count,
    shared_tag_count,
)

logger = logging.getLogger(__name__)

DEFAULT_RELATED_LIMIT = 4

TAG_OVERLAP_PENALTY = 2
SPEAKER_OVERLAP_PENALTY = 4
NO_SHARED_TAG_PENALTY = 4


@dataclass(frozen=True)
class CandidateProfile:
    """Precomputed match signals of one candidate against the anchor."""

    recording: Recording
    shared_tags: int
    shared_speakers: int
    same_episode: bool
    same_location: bool
    score: int


@dataclass
class UsedSelections:
    """What the picks so far have already covered."""

    episodes: set = field(default_factory=set)
    speakers: set = field(default_factory=set)
    tags: set = field(default_factory=set)
    ids: set = field(default_factory=set)

    def add(self, recording: Recording) -> None:
        self.ids.add(recording.id)
        if recording.episode:
            self.episodes.add(recording.episode)
        self.speakers.update(recording.speakers_lower)
        self.tags.update(recording.tags)

    def allows(self, recording: Recording) -> bool:
        """Not picked yet and not from an episode that is already represented."""
        if recording.id in self.ids:
            return False
        return not (recording.episode and recording.episode in self.episodes)

    def diversity_penalty(self, recording: Recording) -> int:
        return (
            TAG_OVERLAP_PENALTY * len(recording.tags & self.tags)
            + SPEAKER_OVERLAP_PENALTY * len(recording.speakers_lower & self.speakers)
        )


# Best available match type first; the last tier matches everything
POOL_TIERS: Tuple[Tuple[str, Callable[[CandidateProfile], bool]], ...] = (
    ("tags", lambda p: p.shared_tags > 0),
    ("speakers", lambda p: p.shared_speakers > 0),
    ("episode", lambda p: p.same_episode),
    ("location", lambda p: p.same_location),
    ("all", lambda p: True),
)


def build_profile(anchor: Recording, candidate: Recording) -> CandidateProfile:
    """Compute the match signals of `candidate` against `anchor`."""
    return CandidateProfile(
        recording=candidate,
        shared_tags=shared_tag_count(anchor, candidate),
        shared_speakers=shared_speaker_count(anchor, candidate),
        same_episode=same_episode(anchor, candidate),
        same_location=candidate.location == anchor.location,
        score=relevance_score(anchor, candidate),
    )


def select_pool_tier(profiles: Sequence[CandidateProfile]) -> int:
    """Index into POOL_TIERS of the first tier with at least one member."""
    for index, (_, matches) in enumerate(POOL_TIERS):
        if any(matches(profile) for profile in profiles):
            return index
    return len(POOL_TIERS) - 1


def pick_next_up(pool: Sequence[CandidateProfile]) -> Optional[CandidateProfile]:
    """
    Pick the strongest match in the pool.

    Compares shared tags, shared speakers, same episode and score, then
    prefers the newer recording and finally the smaller title.
    """
    if not pool:
        return None
    return min(
        pool,
        key=lambda p: (
            -p.shared_tags,
            -p.shared_speakers,
            -int(p.same_episode),
            -p.score,
            -p.recording.date.toordinal(),
            p.recording.title,
        ),
    )


def ranked_score(profile: CandidateProfile, used: UsedSelections, tag_tier: bool) -> int:
    """Relevance score reduced by overlap with what has already been picked."""
    tag_penalty = NO_SHARED_TAG_PENALTY if tag_tier and profile.shared_tags == 0 else 0
    return profile.score - used.diversity_penalty(profile.recording) - tag_penalty


def pick_diverse(
        pool: Iterable[CandidateProfile],
        used: UsedSelections,
        tag_tier: bool
) -> Optional[CandidateProfile]:
    """Best eligible candidate after diversity penalties, or None."""
    eligible = [p for p in pool if used.allows(p.recording)]
    if not eligible:
        return None
    return min(
        eligible,
        key=lambda p: (
            -ranked_score(p, used, tag_tier),
            -p.recording.date.toordinal(),
            p.recording.title,
        ),
    )


def related_recordings(
        anchor: Recording,
        catalog: Iterable[Recording],
        limit: int = DEFAULT_RELATED_LIMIT
) -> List[Recording]:
    """
    Select recordings related to `anchor`.

    The first pick is the strongest match from the best available pool
    tier. Remaining slots are filled greedily, penalising overlap with
    earlier picks and never repeating an episode. Once the chosen pool
    runs dry the fill continues through the lower tiers in order.

    Args:
        anchor: Recording to find related recordings for
        catalog: All recordings (the anchor included)
        limit: Maximum number of recordings to return

    Returns:
        Ordered list of related recordings, never containing the anchor
    """
    if limit <= 0:
        return []

    recordings = list(catalog)
    if not any(r.id == anchor.id for r in recordings):
        logger.warning(f"Recording {anchor.id} not found in catalog")
        return []

    profiles = [build_profile(anchor, r) for r in recordings if r.id != anchor.id]
    if not profiles:
        return []

    max_count = min(limit, len(profiles))
    tier_index = select_pool_tier(profiles)
    tag_tier = POOL_TIERS[tier_index][0] == "tags"

    used = UsedSelections()
    selected: List[Recording] = []

    initial_pool = [p for p in profiles if POOL_TIERS[tier_index][1](p)]
    next_up = pick_next_up(initial_pool)
    if next_up is not None:
        selected.append(next_up.recording)
        used.add(next_up.recording)

    for _, matches in POOL_TIERS[tier_index:]:
        if len(selected) >= max_count:
            break

        pool = [p for p in profiles if matches(p)]
        while len(selected) < max_count:
            best = pick_diverse(pool, used, tag_tier)
            if best is None:
                break
            selected.append(best.recording)
            used.add(best.recording)

    return selected
