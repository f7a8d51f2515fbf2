"""Shared test fixtures and configuration for pytest."""
import os

# Keep the module-level engine off MySQL during tests
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import json
from datetime import date, timedelta
from typing import List

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bnf_recommendation_service.models.base import Base
from bnf_recommendation_service.models.recording import Location, Recording
from bnf_recommendation_service.models.video_like import VideoLike
from bnf_recommendation_service.repos.like_repository import LikeRepository
from bnf_recommendation_service.services.catalog_service import Catalog

REFERENCE_DATE = date(2025, 6, 1)


# ===== Database Fixtures =====

@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine):
    """Create a database session for testing."""
    SessionLocal = sessionmaker(bind=test_db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def like_repository(test_db_session):
    """LikeRepository bound to the test session."""
    return LikeRepository(test_db_session)


@pytest.fixture
def sample_like_records(test_db_session) -> List[VideoLike]:
    """Likes for three recordings: 3, 2 and 1."""
    likes = [
        VideoLike(video_id="yt-rust", ip_hash="ip1", ua_hash="ua1"),
        VideoLike(video_id="yt-rust", ip_hash="ip2", ua_hash="ua1"),
        VideoLike(video_id="yt-rust", ip_hash="ip3", ua_hash="ua2"),
        VideoLike(video_id="yt-go", ip_hash="ip1", ua_hash="ua1"),
        VideoLike(video_id="yt-go", ip_hash="ip2", ua_hash="ua2"),
        VideoLike(video_id="yt-css", ip_hash="ip1", ua_hash="ua1"),
    ]
    test_db_session.add_all(likes)
    test_db_session.commit()
    return likes


# ===== Recording Fixtures =====

def make_recording(
        recording_id: str,
        title: str | None = None,
        tags=(),
        speakers=(),
        location: Location = Location.PRAGUE,
        recorded: date = REFERENCE_DATE,
        episode: str | None = None,
        featured: bool = False,
) -> Recording:
    """Build a Recording with sensible defaults for tests."""
    return Recording(
        id=recording_id,
        short_id=f"s-{recording_id}",
        slug=recording_id.lower().replace(" ", "-"),
        title=title or f"Talk {recording_id}",
        date=recorded,
        location=location,
        speakers=tuple(speakers),
        tags=frozenset(tags),
        episode=episode,
        feature_hero_thumbnail=featured,
    )


@pytest.fixture
def recording_factory():
    """Factory fixture for Recording objects."""
    return make_recording


@pytest.fixture
def sample_recordings() -> List[Recording]:
    """A small catalog across both locations, newest first."""
    return [
        make_recording("yt-rust", "Rust in Production", tags={"rust", "backend"},
                       speakers=["Jana Nováková"], recorded=REFERENCE_DATE - timedelta(days=10),
                       episode="Backend Night", featured=True),
        make_recording("yt-go", "Go Concurrency Patterns", tags={"go", "backend"},
                       speakers=["Petr Svoboda"], recorded=REFERENCE_DATE - timedelta(days=20),
                       episode="Backend Night"),
        make_recording("yt-css", "Modern CSS Layouts", tags={"css", "frontend"},
                       speakers=["Eva Dvořáková"], location=Location.ZLIN,
                       recorded=REFERENCE_DATE - timedelta(days=45), episode="Frontend Evening"),
        make_recording("yt-react", "React Server Components", tags={"react", "frontend"},
                       speakers=["Eva Dvořáková", "Tomáš Černý"], location=Location.ZLIN,
                       recorded=REFERENCE_DATE - timedelta(days=45), episode="Frontend Evening"),
        make_recording("yt-k8s", "Kubernetes for Humans", tags={"devops", "backend"},
                       speakers=["Petr Svoboda"], recorded=REFERENCE_DATE - timedelta(days=120),
                       episode="Ops Meetup"),
        make_recording("yt-a11y", "Accessible Forms", tags={"frontend", "a11y"},
                       speakers=["Lucie Malá"], location=Location.ZLIN,
                       recorded=REFERENCE_DATE - timedelta(days=200)),
        make_recording("yt-ml", "ML at the Edge", tags={"ml"},
                       speakers=["Jana Nováková"], recorded=REFERENCE_DATE - timedelta(days=400),
                       episode="Data Day"),
    ]


@pytest.fixture
def sample_catalog(sample_recordings) -> Catalog:
    """Catalog built from sample_recordings."""
    return Catalog(sample_recordings)


# ===== Data File Fixtures =====

@pytest.fixture
def sample_episodes_json() -> dict:
    return {
        "episodes": [
            {"id": "prague-12", "city": "prague", "number": 12, "title": "Backend Night", "date": "2025-05-20"},
            {"id": "zlin-5", "city": "zlin", "number": 5, "title": "Frontend Evening", "date": None},
        ]
    }


@pytest.fixture
def sample_prague_json() -> dict:
    return {
        "recordings": [
            {
                "youtubeId": "yt-old",
                "shortId": "old1",
                "slug": "old-talk",
                "title": "An Old Talk",
                "speaker": ["Jana Nováková"],
                "date": "2023-03-01",
                "thumbnail": "/thumbs/old.webp",
                "url": "https://youtu.be/yt-old",
                "description": None,
                "tags": ["Backend", "RUST", " "],
            },
            {
                "youtubeId": "yt-new",
                "shortId": "new1",
                "slug": "new-talk",
                "title": "A New Talk",
                "speaker": ["Petr Svoboda"],
                "date": "2025-05-20T18:00:00",
                "thumbnail": "/thumbs/new.webp",
                "featureHeroThumbnail": "/hero/new.webp",
                "url": "https://youtu.be/yt-new",
                "description": "Fresh.",
                "tags": ["Go", "go"],
                "episodeId": "prague-12",
            },
        ]
    }


@pytest.fixture
def sample_zlin_json() -> dict:
    return {
        "recordings": [
            {
                "youtubeId": "yt-mid",
                "shortId": "mid1",
                "slug": "mid-talk",
                "title": "A Middle Talk",
                "speaker": ["Eva Dvořáková"],
                "date": "2024-10-10",
                "thumbnail": "/thumbs/mid.webp",
                "url": "https://youtu.be/yt-mid",
                "description": "Layouts.",
                "tags": ["CSS"],
                "episodeId": "zlin-5",
            },
            {
                "youtubeId": "yt-old",
                "shortId": "old-dup",
                "slug": "old-talk-dup",
                "title": "Duplicate of an Old Talk",
                "speaker": [],
                "date": "2023-03-01",
                "tags": [],
            },
        ]
    }


@pytest.fixture
def data_dir_with_files(tmp_path, sample_episodes_json, sample_prague_json, sample_zlin_json):
    """Temporary data directory with all catalog files."""
    (tmp_path / "episodes.json").write_text(json.dumps(sample_episodes_json), encoding="utf-8")
    (tmp_path / "prague-recordings.json").write_text(json.dumps(sample_prague_json), encoding="utf-8")
    (tmp_path / "zlin-recordings.json").write_text(json.dumps(sample_zlin_json), encoding="utf-8")
    return tmp_path
