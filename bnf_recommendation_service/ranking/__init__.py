"""Scoring and selection of related and trending recordings"""

from .related import related_recordings
from .scoring import relevance_score, trending_score
from .trending import trending_recordings

__all__ = [
    "related_recordings",
    "relevance_score",
    "trending_recordings",
    "trending_score",
]
