"""A single like given to a recording."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Index, String

from bnf_recommendation_service.models.base import Base


class VideoLike(Base):
    """One like per (recording, visitor fingerprint).

    The visitor is identified only by hashed IP and user agent.
    """

    __tablename__ = "video_likes"

    # Composite primary key
    video_id = Column(String(64), primary_key=True)
    ip_hash = Column(String(128), primary_key=True)
    ua_hash = Column(String(128), primary_key=True)

    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        Index("idx_video_likes_video_id", "video_id"),
    )

    def __repr__(self):
        return f"<VideoLike(video_id='{self.video_id}', created_at={self.created_at})>"
