"""Cache-aside workflow over the real SQLite caches."""

from unittest.mock import AsyncMock

import attrs
from sqlalchemy import update
import pytest

from tagcache.application.services import CachedLookupService
from tagcache.domain.entities import RecordingIdScore
from tagcache.infrastructure.persistence.database.db_models import (
    DBCachedRecording,
    DBFingerprintLookup,
)


@pytest.fixture
def service(fingerprint_cache, recording_cache):
    return CachedLookupService(fingerprints=fingerprint_cache, recordings=recording_cache)


async def _age_all(store, model, cached_at):
    async with store.session() as session:
        await session.execute(update(model).values(cached_at=cached_at))


class TestIdentifyWorkflow:
    async def test_second_call_is_served_from_cache(self, service, candidates):
        fetch = AsyncMock(return_value=candidates)

        first = await service.identify("AB12", 180, fetch)
        second = await service.identify("AB12", 180, fetch)

        assert first == second == candidates
        fetch.assert_awaited_once()
        assert service.stats.fingerprint_hits == 1

    async def test_stale_entry_is_refreshed_and_kept(self, store, service, days_ago):
        await service.identify("AB12", 180, AsyncMock(return_value=[("r1", 0.95)]))
        await _age_all(store, DBFingerprintLookup, days_ago(31))

        refreshed = [RecordingIdScore("r3", 0.70)]
        fetch = AsyncMock(return_value=refreshed)
        assert await service.identify("AB12", 180, fetch) == refreshed
        await store.drain()

        again = AsyncMock()
        assert await service.identify("AB12", 180, again) == refreshed
        again.assert_not_called()


class TestRecordingWorkflow:
    async def test_stale_entry_is_refreshed_and_kept(
        self, store, service, sample_recording, days_ago
    ):
        await service.recording(
            sample_recording.recording_id, AsyncMock(return_value=sample_recording)
        )
        await _age_all(store, DBCachedRecording, days_ago(31))

        refreshed = attrs.evolve(sample_recording, title="Refreshed")
        fetch = AsyncMock(return_value=refreshed)
        await service.recording(sample_recording.recording_id, fetch)
        fetch.assert_awaited_once()
        await store.drain()

        again = AsyncMock()
        cached = await service.recording(sample_recording.recording_id, again)
        assert cached.title == "Refreshed"
        again.assert_not_called()
