"""Immutable value types for the recording catalog."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterator, Optional, Tuple


class Location(str, Enum):
    """The two sites where recordings are made."""

    PRAGUE = "Prague"
    ZLIN = "Zlin"


@dataclass(frozen=True)
class Episode:
    """A single event edition that recordings belong to."""

    id: str
    city: str
    number: int
    title: str
    date: Optional[date] = None


@dataclass(frozen=True)
class Recording:
    """A recorded talk.

    Tags are lowercase and unique; speakers keep their display casing
    and order. Instances are never mutated after load.
    """

    id: str
    short_id: str
    slug: str
    title: str
    date: date
    location: Location
    speakers: Tuple[str, ...] = ()
    tags: frozenset = field(default_factory=frozenset)
    description: Optional[str] = None
    episode: Optional[str] = None
    episode_id: Optional[str] = None
    episode_number: Optional[int] = None
    feature_hero_thumbnail: bool = False
    thumbnail: Optional[str] = None
    url: Optional[str] = None

    @property
    def speakers_lower(self) -> frozenset:
        return frozenset(name.lower() for name in self.speakers)

    def to_dict(self) -> dict:
        """JSON-friendly representation."""
        return {
            "id": self.id,
            "short_id": self.short_id,
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "speakers": list(self.speakers),
            "date": self.date.isoformat(),
            "tags": sorted(self.tags),
            "location": self.location.value,
            "episode": self.episode,
            "episode_id": self.episode_id,
            "episode_number": self.episode_number,
            "feature_hero_thumbnail": self.feature_hero_thumbnail,
            "thumbnail": self.thumbnail,
            "url": self.url,
        }


@dataclass(frozen=True)
class TrendingRecording:
    """A recording annotated with the signals it was ranked by."""

    recording: Recording
    like_count: int
    trending_score: int

    def __iter__(self) -> Iterator:
        return iter((self.recording, self.like_count, self.trending_score))

    def to_dict(self) -> dict:
        data = self.recording.to_dict()
        data["like_count"] = self.like_count
        data["trending_score"] = self.trending_score
        return data
