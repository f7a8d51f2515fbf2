"""Repository classes"""

from bnf_recommendation_service.repos.like_repository import LikeRepository

__all__ = [
    "LikeRepository",
]
