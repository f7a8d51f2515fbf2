"""Service serving related and trending recordings."""
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional
import logging

from bnf_recommendation_service.config import (
    get_like_count_source,
    get_like_count_timeout,
    get_related_recordings_limit,
    get_trending_recordings_limit,
)
from bnf_recommendation_service.models.recording import Recording, TrendingRecording
from bnf_recommendation_service.ranking import related_recordings, trending_recordings
from bnf_recommendation_service.services.catalog_service import CatalogStore
from bnf_recommendation_service.services.data_loader_service import RecordingDataLoader
from bnf_recommendation_service.services.like_count_provider import (
    DatabaseLikeCountProvider,
    EmptyLikeCountProvider,
    HttpLikeCountProvider,
    LikeCountProvider,
    fetch_like_counts_safe,
)

logger = logging.getLogger(__name__)


def create_like_count_provider(source: Optional[str] = None, timeout: Optional[float] = None) -> LikeCountProvider:
    """
    Build the like count provider named by config.

    Args:
        source: 'database', 'http' or 'none' (from config if None)
        timeout: Request timeout for the HTTP provider

    Returns:
        Like count provider
    """
    source = source or get_like_count_source()
    if source == "http":
        return HttpLikeCountProvider(timeout=timeout or get_like_count_timeout())
    if source == "none":
        return EmptyLikeCountProvider()
    return DatabaseLikeCountProvider()


class RecordingRecommendationService:
    """
    Service for related and trending recordings.
    Holds one catalog store for the process and fetches like counts per call.
    """

    def __init__(
            self,
            catalog_store: Optional[CatalogStore] = None,
            like_count_provider: Optional[LikeCountProvider] = None,
            like_timeout: Optional[float] = None,
            data_dir: Optional[Path] = None,
            clock: Callable[[], datetime] = lambda: datetime.now(UTC)
    ):
        """
        Initialize the recommendation service.

        Args:
            catalog_store: Catalog store (defaults to one backed by RecordingDataLoader)
            like_count_provider: Like count source (defaults to config)
            like_timeout: Seconds to wait for like counts (defaults to config)
            data_dir: Data directory for the default loader
            clock: Returns the current time, used for trending recency
        """
        if catalog_store is None:
            loader = RecordingDataLoader(data_dir=data_dir)
            catalog_store = CatalogStore(loader.load_recordings)

        self.catalog_store = catalog_store
        self.like_timeout = like_timeout if like_timeout is not None else get_like_count_timeout()
        self.like_count_provider = like_count_provider or create_like_count_provider(timeout=self.like_timeout)
        self.clock = clock
        self.related_limit = get_related_recordings_limit()
        self.trending_limit = get_trending_recordings_limit()

        logger.info("Initialized RecordingRecommendationService")
        logger.info(f"Like counts via {type(self.like_count_provider).__name__} (timeout: {self.like_timeout}s)")

    def get_recording(self, slug: str) -> Optional[Recording]:
        """Look up a recording by slug."""
        return self.catalog_store.load().get_by_slug(slug)

    def get_related_recordings(self, slug: str, limit: Optional[int] = None) -> List[Recording]:
        """
        Get recordings related to the one with the given slug.

        Args:
            slug: Anchor recording slug
            limit: Number of recordings (defaults to config)

        Returns:
            Related recordings, empty for unknown slugs
        """
        catalog = self.catalog_store.load()
        anchor = catalog.get_by_slug(slug)
        if anchor is None:
            logger.warning(f"Recording '{slug}' not found")
            return []

        limit = self.related_limit if limit is None else limit
        return related_recordings(anchor, catalog, limit)

    def get_trending_recordings(self, limit: Optional[int] = None) -> List[TrendingRecording]:
        """
        Get the currently trending recordings.

        Like count failures degrade to zero likes for every recording.

        Args:
            limit: Number of recordings (defaults to config)

        Returns:
            Trending recordings with their like counts and scores
        """
        limit = self.trending_limit if limit is None else limit
        if limit <= 0:
            return []

        catalog = self.catalog_store.load()
        like_counts = fetch_like_counts_safe(self.like_count_provider, self.like_timeout)
        return trending_recordings(catalog, like_counts, self.clock(), limit)

    def get_stats(self) -> Dict:
        """Get statistics about the catalog and ranking defaults."""
        catalog = self.catalog_store.load()
        return {
            'total_recordings': len(catalog),
            'recordings_by_location': catalog.count_by_location(),
            'defaults': {
                'related_limit': self.related_limit,
                'trending_limit': self.trending_limit,
                'like_timeout_seconds': self.like_timeout
            }
        }
