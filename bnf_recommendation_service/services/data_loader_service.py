"""Service to load the recording catalog from the site's JSON data files"""
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional
import json
import logging

from bnf_recommendation_service.config import get_recordings_data_dir
from bnf_recommendation_service.models.recording import Episode, Location, Recording

logger = logging.getLogger(__name__)

RECORDING_FILES = {
    Location.PRAGUE: "prague-recordings.json",
    Location.ZLIN: "zlin-recordings.json",
}
EPISODES_FILE = "episodes.json"


def normalize_tags(tags: Optional[List[str]]) -> frozenset:
    """Lowercase, strip and drop empty tags."""
    return frozenset(
        tag.strip().lower()
        for tag in (tags or [])
        if tag and tag.strip()
    )


def parse_date(value: str) -> date:
    """Parse an ISO date, ignoring any time-of-day part."""
    return date.fromisoformat(value[:10])


class RecordingDataLoader:
    """Loads recordings for both locations and enriches them with episode data."""

    def __init__(self, data_dir: Optional[Path] = None):
        """
        Initialize the loader.

        Args:
            data_dir: Directory containing the JSON files (from config if None)
        """
        self.data_dir = Path(data_dir) if data_dir is not None else get_recordings_data_dir()

    def _read_json(self, filename: str) -> Optional[Dict]:
        path = self.data_dir / filename
        if not path.exists():
            return None

        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Malformed JSON in {path}: {e}") from e

    def load_episodes(self) -> Dict[str, Episode]:
        """
        Load episodes keyed by id.

        Returns:
            Mapping of episode id to Episode (empty if the file is missing)
        """
        data = self._read_json(EPISODES_FILE)
        if data is None:
            logger.info(f"No {EPISODES_FILE} in {self.data_dir}, skipping episode enrichment")
            return {}

        episodes = {}
        for raw in data.get("episodes", []):
            episode = Episode(
                id=raw["id"],
                city=raw.get("city", ""),
                number=int(raw["number"]),
                title=raw["title"],
                date=parse_date(raw["date"]) if raw.get("date") else None,
            )
            episodes[episode.id] = episode

        logger.info(f"✓ Loaded {len(episodes)} episodes")
        return episodes

    def parse_recording(
            self,
            raw: Dict,
            location: Location,
            episodes: Dict[str, Episode]
    ) -> Recording:
        """
        Convert one raw JSON record into a Recording.

        Args:
            raw: Record as stored in the data file (camelCase keys)
            location: Location the file belongs to
            episodes: Known episodes for enrichment

        Returns:
            Recording
        """
        episode_id = raw.get("episodeId")
        episode_title = raw.get("episode")
        episode_number = raw.get("episodeNumber")

        episode = episodes.get(episode_id) if episode_id else None
        if episode is not None:
            episode_title = episode.title
            episode_number = episode.number

        return Recording(
            id=raw["youtubeId"],
            short_id=raw["shortId"],
            slug=raw["slug"],
            title=raw["title"],
            description=raw.get("description"),
            speakers=tuple(raw.get("speaker") or ()),
            date=parse_date(raw["date"]),
            tags=normalize_tags(raw.get("tags")),
            location=location,
            episode=episode_title or None,
            episode_id=episode_id,
            episode_number=episode_number,
            feature_hero_thumbnail=bool(raw.get("featureHeroThumbnail")),
            thumbnail=raw.get("thumbnail"),
            url=raw.get("url"),
        )

    def load_location(self, location: Location, episodes: Dict[str, Episode]) -> List[Recording]:
        """Load all recordings of one location."""
        filename = RECORDING_FILES[location]
        data = self._read_json(filename)
        if data is None:
            logger.warning(f"Recording file {filename} not found in {self.data_dir}")
            return []

        recordings = []
        for raw in data.get("recordings", []):
            try:
                recordings.append(self.parse_recording(raw, location, episodes))
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Invalid recording in {filename}: {e}") from e

        logger.info(f"Loaded {len(recordings)} recordings for {location.value}")
        return recordings

    def load_recordings(self) -> List[Recording]:
        """
        Load the full catalog.

        Returns:
            Recordings deduplicated by id (first wins), newest first
        """
        episodes = self.load_episodes()

        recordings: List[Recording] = []
        seen_ids = set()
        for location in RECORDING_FILES:
            for recording in self.load_location(location, episodes):
                if recording.id in seen_ids:
                    logger.warning(f"Duplicate recording id {recording.id}, keeping first")
                    continue
                seen_ids.add(recording.id)
                recordings.append(recording)

        recordings.sort(key=lambda r: r.date, reverse=True)

        logger.info(f"✓ Loaded {len(recordings)} recordings")
        return recordings
