"""Shared test fixtures: cache store on a temporary SQLite file and sample entities."""

from datetime import UTC, datetime, timedelta

import pytest

from tagcache.domain.entities import (
    ArtistCredit,
    CachedRecording,
    Medium,
    Rating,
    RecordingIdScore,
    ReleaseInfo,
    TrackInfo,
)
from tagcache.infrastructure.persistence.database.db_connection import CacheStore
from tagcache.infrastructure.persistence.repositories import (
    FingerprintCache,
    RecordingCache,
)
from tagcache.infrastructure.services.expiry_policy import ExpiryPolicy

RECORDING_ID = "b1a9c0e9-d987-4042-ae91-78d6a3267d69"
RELEASE_ID = "0b0c2f2e-9b5a-4a6f-9bd2-2f1b6a3b9c11"
TRACK_ID = "7d7c5f7e-1c2b-4a4d-8e3f-5a6b7c8d9e0f"


@pytest.fixture
def policy_at():
    """Factory for expiry policies whose clock is frozen at a given moment."""

    def _policy_at(moment: datetime, ttl_days: int = 30) -> ExpiryPolicy:
        return ExpiryPolicy(ttl_days=ttl_days, clock=lambda: moment)

    return _policy_at


@pytest.fixture
def days_ago():
    """Factory for UTC datetimes `days` days in the past."""

    def _days_ago(days: float) -> datetime:
        return datetime.now(UTC) - timedelta(days=days)

    return _days_ago


@pytest.fixture
def recording_id():
    return RECORDING_ID


@pytest.fixture
def cache_dir(tmp_path):
    """Directory the cache file is created in (does not exist yet)."""
    return tmp_path / "MyriadMusicTagger"


@pytest.fixture
async def store(cache_dir):
    """Open cache store with the default 30 day TTL, closed after the test."""
    cache_store = await CacheStore.open(cache_dir, policy=ExpiryPolicy(ttl_days=30))
    yield cache_store
    await cache_store.close()


@pytest.fixture
def fingerprint_cache(store):
    return FingerprintCache(store, store_empty_results=False)


@pytest.fixture
def recording_cache(store):
    return RecordingCache(store)


@pytest.fixture
def candidates():
    return [
        RecordingIdScore(recording_id="r1", score=0.95),
        RecordingIdScore(recording_id="r2", score=0.40),
    ]


@pytest.fixture
def sample_recording():
    """Recording with credits, rating and one release holding one medium."""
    return CachedRecording(
        recording_id=RECORDING_ID,
        title="Paranoid Android",
        artist_credit_name="Radiohead",
        all_artist_names=["Radiohead"],
        album_title="OK Computer",
        release_date="1997-05-21",
        disambiguation="album version",
        isrcs=["GBAYE9700182"],
        rating=Rating(value=4.5, votes_count=12),
        artist_credits=[ArtistCredit(name="Radiohead", join_phrase="")],
        releases=[
            ReleaseInfo(
                id=RELEASE_ID,
                title="OK Computer",
                release_date="1997-05-21",
                status="Official",
                barcode="724385522925",
                country_code="GB",
                media=[
                    Medium(
                        format="CD",
                        track_count=12,
                        tracks=[
                            TrackInfo(
                                id=TRACK_ID,
                                title="Paranoid Android",
                                number="2",
                                length_ms=383000,
                                recording_id=RECORDING_ID,
                            )
                        ],
                    )
                ],
            )
        ],
    )


@pytest.fixture
def sparse_recording():
    """Recording with no optional fields supplied upstream."""
    return CachedRecording(recording_id=RECORDING_ID, title="Untitled")
