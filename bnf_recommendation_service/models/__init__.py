"""Domain types and SQLAlchemy models"""

from bnf_recommendation_service.models.base import Base
from bnf_recommendation_service.models.recording import (
    Episode,
    Location,
    Recording,
    TrendingRecording,
)
from bnf_recommendation_service.models.video_like import VideoLike

__all__ = [
    "Base",
    "Episode",
    "Location",
    "Recording",
    "TrendingRecording",
    "VideoLike",
]
