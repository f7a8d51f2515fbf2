"""Recording endpoints: related, trending and likes."""
import azure.functions as func
import logging
import json

from bnf_recommendation_service.services import LikeService, RecordingRecommendationService
from bnf_recommendation_service.services.like_service import client_ip

# Initialize blueprint
bp = func.Blueprint()

# Initialize service (singleton pattern)
recommendation_service = RecordingRecommendationService()
like_service = LikeService(recommendation_service.catalog_store)

logger = logging.getLogger(__name__)

MAX_RELATED = 12
MAX_TRENDING = 24


def _json_response(body: dict, status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(body, default=str),
        status_code=status_code,
        mimetype="application/json"
    )


def _parse_limit(req: func.HttpRequest, default: int, maximum: int) -> int | None:
    """Read ?n=, returning None when it is not an integer in 1..maximum."""
    try:
        n = int(req.params.get('n', default))
    except (TypeError, ValueError):
        return None
    if n < 1 or n > maximum:
        return None
    return n


@bp.route(route="recordings/{slug}/related", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def get_related_recordings(req: func.HttpRequest) -> func.HttpResponse:
    """
    Get recordings related to a recording.

    Query Parameters:
        - n: Number of recordings (default: 4, max: 12)
    """
    try:
        slug = req.route_params.get('slug')

        if not slug:
            return _json_response({"error": "slug is required"}, 400)

        n = _parse_limit(req, recommendation_service.related_limit, MAX_RELATED)
        if n is None:
            return _json_response({"error": f"n must be an integer between 1 and {MAX_RELATED}"}, 400)

        if recommendation_service.get_recording(slug) is None:
            return _json_response({"slug": slug, "error": "Recording not found"}, 404)

        related = recommendation_service.get_related_recordings(slug=slug, limit=n)

        return _json_response({
            "slug": slug,
            "count": len(related),
            "recordings": [recording.to_dict() for recording in related]
        })

    except Exception as e:
        logger.error(f"Error getting related recordings: {str(e)}", exc_info=True)
        return _json_response({"error": "Internal server error"}, 500)


@bp.route(route="recordings/trending", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def get_trending_recordings(req: func.HttpRequest) -> func.HttpResponse:
    """
    Get trending recordings.

    Query Parameters:
        - n: Number of recordings (default: 6, max: 24)
    """
    try:
        n = _parse_limit(req, recommendation_service.trending_limit, MAX_TRENDING)
        if n is None:
            return _json_response({"error": f"n must be an integer between 1 and {MAX_TRENDING}"}, 400)

        trending = recommendation_service.get_trending_recordings(limit=n)

        return _json_response({
            "count": len(trending),
            "recordings": [entry.to_dict() for entry in trending]
        })

    except Exception as e:
        logger.error(f"Error getting trending recordings: {str(e)}", exc_info=True)
        return _json_response({"error": "Internal server error"}, 500)


@bp.route(route="recordings/{short_id}/likes", methods=["GET", "POST", "DELETE"], auth_level=func.AuthLevel.ANONYMOUS)
def recording_likes(req: func.HttpRequest) -> func.HttpResponse:
    """
    Read, add or remove the caller's like on a recording.

    GET returns {count, has_liked}; POST returns {count, added};
    DELETE returns {count, removed}.
    """
    try:
        short_id = req.route_params.get('short_id')

        if not short_id:
            return _json_response({"error": "short_id is required"}, 400)

        ip = client_ip(req.headers)
        user_agent = req.headers.get('user-agent') or ""

        if req.method == "POST":
            result = like_service.add_like(short_id, ip, user_agent)
        elif req.method == "DELETE":
            result = like_service.remove_like(short_id, ip, user_agent)
        else:
            result = like_service.get_likes(short_id, ip, user_agent)

        if result is None:
            return _json_response({"short_id": short_id, "error": "Invalid recording id"}, 400)

        return _json_response(result)

    except Exception as e:
        logger.error(f"Error handling likes: {str(e)}", exc_info=True)
        return _json_response({"error": "Internal server error"}, 500)


# noinspection PyUnusedLocal
@bp.route(route="recordings/stats", methods=["GET"])
def get_recording_stats(req: func.HttpRequest) -> func.HttpResponse:
    """
    Get statistics about the recording catalog.
    """
    try:
        return _json_response(recommendation_service.get_stats())

    except Exception as e:
        logger.error(f"Error getting stats: {str(e)}", exc_info=True)
        return _json_response({"error": "Internal server error"}, 500)


# noinspection PyUnusedLocal
@bp.route(route="recordings/health", methods=["GET"])
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint."""
    return _json_response({
        "status": "healthy",
        "service": "bnf-recommendation-service",
        "version": "1.0.0"
    })
