"""
Script to print related or trending recordings from the local catalog.
Useful for checking ranking changes against real data before deploying.
"""

import sys
from pathlib import Path

# Add parent directory to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import argparse
import logging

from bnf_recommendation_service.services import RecordingRecommendationService

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show related or trending recordings")
    parser.add_argument("--data-dir", type=Path, default=None, help="Directory with the recording JSON files")
    subparsers = parser.add_subparsers(dest="command", required=True)

    related = subparsers.add_parser("related", help="Recordings related to one recording")
    related.add_argument("slug", help="Slug of the anchor recording")
    related.add_argument("--limit", type=int, default=4, help="Number of recordings (default: 4)")

    trending = subparsers.add_parser("trending", help="Currently trending recordings")
    trending.add_argument("--limit", type=int, default=6, help="Number of recordings (default: 6)")

    return parser.parse_args(argv)


def show_related(service: RecordingRecommendationService, slug: str, limit: int) -> int:
    """Log related recordings; returns the number shown."""
    anchor = service.get_recording(slug)
    related = service.get_related_recordings(slug, limit=limit)
    logger.info(f"Related to '{anchor.title}' ({anchor.location.value}, {anchor.date}):")
    for i, recording in enumerate(related, 1):
        logger.info(
            f"  {i}. {recording.title} "
            f"({recording.location.value}, {recording.date}, "
            f"tags: {', '.join(sorted(recording.tags))})"
        )
    return len(related)


def show_trending(service: RecordingRecommendationService, limit: int) -> int:
    """Log trending recordings; returns the number shown."""
    trending = service.get_trending_recordings(limit=limit)
    logger.info("Trending recordings:")
    for i, (recording, like_count, score) in enumerate(trending, 1):
        logger.info(
            f"  {i}. {recording.title} "
            f"(score: {score}, likes: {like_count}, {recording.location.value})"
        )
    return len(trending)


def main(argv=None) -> int:
    """Main execution function."""
    args = parse_args(argv)
    service = RecordingRecommendationService(data_dir=args.data_dir)

    if args.command == "related":
        if service.get_recording(args.slug) is None:
            logger.error(f"Recording '{args.slug}' not found")
            return 1
        show_related(service, args.slug, args.limit)
        return 0

    show_trending(service, args.limit)
    return 0


if __name__ == "__main__":
    sys.exit(main())
