"""Service classes"""

from .catalog_service import Catalog, CatalogStore
from .data_loader_service import RecordingDataLoader
from .like_service import LikeService
from .recommendation_service import RecordingRecommendationService

__all__ = ["Catalog", "CatalogStore", "LikeService", "RecordingDataLoader", "RecordingRecommendationService"]
