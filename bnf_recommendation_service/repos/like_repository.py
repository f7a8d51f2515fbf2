"""Repository for recording likes."""

import logging
from datetime import UTC, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from bnf_recommendation_service.models import VideoLike

logger = logging.getLogger(__name__)


class LikeRepository:
    """
    Repository for recording likes.
    """

    def __init__(self, db: Session):
        self.db = db

    # noinspection PyTypeChecker
    def count_likes_by_video(self) -> dict[str, int]:
        """
        Count likes for every recording that has any.

        Returns:
            Dict of video_id -> like count
        """
        rows = (
            self.db.query(VideoLike.video_id, func.count(VideoLike.video_id))
            .group_by(VideoLike.video_id)
            .all()
        )
        return {video_id: int(count) for video_id, count in rows}

    def count_likes(self, video_id: str) -> int:
        """Count likes of a single recording."""
        return self.db.query(VideoLike).filter(VideoLike.video_id == video_id).count()

    def has_liked(self, video_id: str, ip_hash: str, ua_hash: str) -> bool:
        """Whether this visitor fingerprint already liked the recording."""
        existing = (
            self.db.query(VideoLike)
            .filter(
                VideoLike.video_id == video_id,
                VideoLike.ip_hash == ip_hash,
                VideoLike.ua_hash == ua_hash,
            )
            .first()
        )
        return existing is not None

    def add_like(self, video_id: str, ip_hash: str, ua_hash: str) -> tuple[bool, int]:
        """
        Add a like; a repeated like from the same fingerprint is a no-op.

        Args:
            video_id: Recording id
            ip_hash: Hashed visitor IP
            ua_hash: Hashed visitor user agent

        Returns:
            (added, like count after the call)
        """
        added = False
        if not self.has_liked(video_id, ip_hash, ua_hash):
            self.db.add(
                VideoLike(
                    video_id=video_id,
                    ip_hash=ip_hash,
                    ua_hash=ua_hash,
                    created_at=datetime.now(UTC),
                )
            )
            self.db.commit()
            added = True
            logger.info(f"✓ Added like for {video_id}")

        return added, self.count_likes(video_id)

    def remove_like(self, video_id: str, ip_hash: str, ua_hash: str) -> tuple[bool, int]:
        """
        Remove a like.

        Returns:
            (removed, like count after the call)
        """
        count = (
            self.db.query(VideoLike)
            .filter(
                VideoLike.video_id == video_id,
                VideoLike.ip_hash == ip_hash,
                VideoLike.ua_hash == ua_hash,
            )
            .delete()
        )
        self.db.commit()

        return count > 0, self.count_likes(video_id)
