"""Immutable recording catalog and its compute-once store."""
import logging
import threading
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from bnf_recommendation_service.models.recording import Location, Recording

logger = logging.getLogger(__name__)


class Catalog:
    """
    Immutable, date-sorted snapshot of all recordings.

    A changed data source means building a new Catalog, never editing one.
    """

    def __init__(self, recordings: Iterable[Recording]):
        """
        Build a catalog snapshot.

        Args:
            recordings: Recordings in any order; duplicate ids keep the first

        Raises:
            ValueError: If two recordings share a short id
        """
        unique: List[Recording] = []
        by_id: Dict[str, Recording] = {}
        by_short_id: Dict[str, Recording] = {}

        for recording in recordings:
            if recording.id in by_id:
                continue
            if recording.short_id in by_short_id:
                raise ValueError(f"Duplicate short id: {recording.short_id}")
            by_id[recording.id] = recording
            by_short_id[recording.short_id] = recording
            unique.append(recording)

        self._recordings: Tuple[Recording, ...] = tuple(
            sorted(unique, key=lambda r: r.date, reverse=True)
        )
        self._by_id = by_id
        self._by_short_id = by_short_id
        self._by_slug = {r.slug: r for r in reversed(self._recordings)}

    @property
    def recordings(self) -> Tuple[Recording, ...]:
        return self._recordings

    def __len__(self) -> int:
        return len(self._recordings)

    def __iter__(self) -> Iterator[Recording]:
        return iter(self._recordings)

    def __contains__(self, recording: object) -> bool:
        return isinstance(recording, Recording) and recording.id in self._by_id

    def get_by_id(self, recording_id: str) -> Optional[Recording]:
        return self._by_id.get(recording_id)

    def get_by_slug(self, slug: str) -> Optional[Recording]:
        """First recording (newest) with this slug, or None."""
        return self._by_slug.get(slug)

    def get_by_short_id(self, short_id: str) -> Optional[Recording]:
        return self._by_short_id.get(short_id)

    def is_valid_short_id(self, short_id: str) -> bool:
        """Whether a short id belongs to a known recording."""
        return short_id in self._by_short_id

    def count_by_location(self) -> Dict[str, int]:
        counts = {location.value: 0 for location in Location}
        for recording in self._recordings:
            counts[recording.location.value] += 1
        return counts


class CatalogStore:
    """
    Builds the catalog on first use and hands every caller the same snapshot.

    Concurrent first callers block until the single build finishes.
    """

    def __init__(self, loader: Callable[[], Iterable[Recording]]):
        """
        Args:
            loader: Callable returning the recordings (e.g. RecordingDataLoader.load_recordings)
        """
        self._loader = loader
        self._catalog: Optional[Catalog] = None
        self._lock = threading.Lock()

    def load(self) -> Catalog:
        """Return the catalog, building it once if needed."""
        catalog = self._catalog
        if catalog is not None:
            return catalog

        with self._lock:
            if self._catalog is None:
                logger.info("Building recording catalog...")
                self._catalog = Catalog(self._loader())
                logger.info(f"✓ Catalog ready with {len(self._catalog)} recordings")
            return self._catalog

    def invalidate(self) -> None:
        """Drop the current snapshot; the next load() builds a fresh one."""
        with self._lock:
            self._catalog = None
        logger.info("Recording catalog invalidated")
