"""Like count providers feeding the trending ranking."""
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Dict, Optional, Protocol
import logging

import requests

from bnf_recommendation_service.config import get_engagement_service_url
from bnf_recommendation_service.models.database import SessionLocal
from bnf_recommendation_service.repos import LikeRepository

logger = logging.getLogger(__name__)

# Shared by every fetch; a hung provider can hold at most this many threads
LIKE_COUNT_WORKERS = 2
_executor = ThreadPoolExecutor(max_workers=LIKE_COUNT_WORKERS, thread_name_prefix="like-counts")


class LikeCountProvider(Protocol):
    """Anything that can return like counts keyed by recording id. May raise."""

    def fetch_like_counts(self) -> Dict[str, int]:
        ...


class EmptyLikeCountProvider:
    """Provider used when like counts are disabled."""

    def fetch_like_counts(self) -> Dict[str, int]:
        return {}


class DatabaseLikeCountProvider:
    """Counts likes stored in the video_likes table."""

    def __init__(self, session_factory=None):
        self.session_factory = session_factory or SessionLocal

    def fetch_like_counts(self) -> Dict[str, int]:
        db = self.session_factory()
        try:
            repo = LikeRepository(db)
            return repo.count_likes_by_video()
        finally:
            db.close()


class HttpLikeCountProvider:
    """Fetches like counts from the engagement service."""

    def __init__(self, service_url: Optional[str] = None, timeout: float = 2.0):
        self.service_url = service_url or get_engagement_service_url()
        self.timeout = timeout
        # Single attempt per fetch; callers fall back to {} on failure
        self.session = requests.Session()

    def fetch_like_counts(self) -> Dict[str, int]:
        """
        GET {service_url}/likes/counts.

        Returns:
            Dict of recording id -> like count; malformed entries are dropped

        Raises:
            requests.RequestException: On network or HTTP errors
            ValueError: If the body is not a JSON object
        """
        url = f"{self.service_url}/likes/counts"
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()

        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object from {url}, got {type(data).__name__}")

        counts = {}
        for recording_id, count in data.items():
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                logger.debug(f"Dropping invalid like count for {recording_id}: {count!r}")
                continue
            counts[str(recording_id)] = count
        return counts


def fetch_like_counts_safe(provider: LikeCountProvider, timeout: float = 2.0) -> Dict[str, int]:
    """
    Fetch like counts, degrading to an empty map on failure or timeout.

    Args:
        provider: Like count provider
        timeout: Seconds to wait before giving up

    Returns:
        Like counts, or {} when the provider is unavailable
    """
    future = _executor.submit(provider.fetch_like_counts)
    try:
        return dict(future.result(timeout=timeout))
    except FutureTimeoutError:
        # Drops the call if it is still queued behind hung workers
        future.cancel()
        logger.warning(f"Like counts unavailable: provider timed out after {timeout}s")
        return {}
    except Exception as e:
        logger.warning(f"Like counts unavailable: {e}")
        return {}
