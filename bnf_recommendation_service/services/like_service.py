"""Service for reading and toggling a visitor's like on one recording."""
from typing import Callable, Dict, Mapping, Optional, Tuple
import hashlib
import logging

from sqlalchemy.orm import Session

from bnf_recommendation_service.config import get_likes_hash_salt
from bnf_recommendation_service.models.database import SessionLocal
from bnf_recommendation_service.repos import LikeRepository
from bnf_recommendation_service.services.catalog_service import CatalogStore

logger = logging.getLogger(__name__)

UNKNOWN_IP = "0.0.0.0"


def hash_value(value: str, salt: str = "") -> str:
    """Salted SHA-256 hex digest; raw IPs and user agents are never stored."""
    return hashlib.sha256(f"{value}:{salt}".encode("utf-8")).hexdigest()


def client_ip(headers: Mapping[str, str]) -> str:
    """First X-Forwarded-For hop, then X-Real-IP, then a placeholder."""
    forwarded = headers.get("x-forwarded-for") or ""
    first_hop = forwarded.split(",")[0].strip()
    return first_hop or headers.get("x-real-ip") or UNKNOWN_IP


class LikeService:
    """
    Likes of single recordings, addressed by short id.

    A visitor is identified by hashed IP and user agent, so one visitor
    can like a recording at most once.
    """

    def __init__(
            self,
            catalog_store: CatalogStore,
            session_factory: Optional[Callable[[], Session]] = None,
            salt: Optional[str] = None
    ):
        """
        Initialize the like service.

        Args:
            catalog_store: Catalog used to validate short ids
            session_factory: Database session factory (defaults to SessionLocal)
            salt: Hash salt (from config if None)
        """
        self.catalog_store = catalog_store
        self.session_factory = session_factory or SessionLocal
        self.salt = salt if salt is not None else get_likes_hash_salt()

    def recording_id(self, short_id: str) -> Optional[str]:
        """Recording id for a short id, or None if the short id is unknown."""
        catalog = self.catalog_store.load()
        if not catalog.is_valid_short_id(short_id):
            return None
        return catalog.get_by_short_id(short_id).id

    def fingerprint(self, ip: str, user_agent: str) -> Tuple[str, str]:
        return hash_value(ip, self.salt), hash_value(user_agent.strip().lower(), self.salt)

    def get_likes(self, short_id: str, ip: str, user_agent: str) -> Optional[Dict]:
        """
        Like count of a recording and whether this visitor liked it.

        Returns:
            {'count', 'has_liked'}, or None for an unknown short id
        """
        video_id = self.recording_id(short_id)
        if video_id is None:
            return None

        ip_hash, ua_hash = self.fingerprint(ip, user_agent)
        db = self.session_factory()
        try:
            repo = LikeRepository(db)
            return {
                "count": repo.count_likes(video_id),
                "has_liked": repo.has_liked(video_id, ip_hash, ua_hash),
            }
        finally:
            db.close()

    def add_like(self, short_id: str, ip: str, user_agent: str) -> Optional[Dict]:
        """
        Like a recording.

        Returns:
            {'count', 'added'}, or None for an unknown short id
        """
        video_id = self.recording_id(short_id)
        if video_id is None:
            return None

        ip_hash, ua_hash = self.fingerprint(ip, user_agent)
        db = self.session_factory()
        try:
            added, count = LikeRepository(db).add_like(video_id, ip_hash, ua_hash)
            return {"count": count, "added": added}
        finally:
            db.close()

    def remove_like(self, short_id: str, ip: str, user_agent: str) -> Optional[Dict]:
        """
        Withdraw a like.

        Returns:
            {'count', 'removed'}, or None for an unknown short id
        """
        video_id = self.recording_id(short_id)
        if video_id is None:
            return None

        ip_hash, ua_hash = self.fingerprint(ip, user_agent)
        db = self.session_factory()
        try:
            removed, count = LikeRepository(db).remove_like(video_id, ip_hash, ua_hash)
            if removed:
                logger.info(f"✓ Removed like for {video_id}")
            return {"count": count, "removed": removed}
        finally:
            db.close()
