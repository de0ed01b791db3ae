"""Recording metadata cache.

Keyed by canonical recording ID. Identifiers that do not parse are treated as
a deterministic miss without touching storage.
"""

from datetime import datetime

from sqlalchemy import delete, select

from tagcache.config import get_logger, resilient_operation
from tagcache.domain.entities import CachedRecording, canonical_recording_id
from tagcache.infrastructure.persistence.database.db_connection import CacheStore
from tagcache.infrastructure.persistence.database.db_models import DBCachedRecording
from tagcache.infrastructure.persistence.repositories.base_repo import upsert_row
from tagcache.infrastructure.persistence.repositories.mappers import RecordingMapper
from tagcache.infrastructure.services.expiry_policy import ExpiryPolicy

logger = get_logger(__name__).bind(service="musicbrainz_cache")


class RecordingCache:
    """Cache of recording metadata with nested credits and releases."""

    def __init__(self, store: CacheStore, policy: ExpiryPolicy | None = None) -> None:
        self.store = store
        self.policy = policy or store.policy

    @resilient_operation("recording_cache_get", fallback=None)
    async def get(self, recording_id: str) -> CachedRecording | None:
        """Return the fresh cached recording, or None.

        Unparsable IDs return None immediately. A stale row is reported as a
        miss and deleted in the background.
        """
        canonical_id = canonical_recording_id(recording_id)
        if canonical_id is None:
            logger.warning(
                f"Attempted to get cached recording with invalid recording ID: {recording_id!r}"
            )
            return None

        logger.debug(f"Retrieving recording from cache (recording ID: {canonical_id})")
        async with self.store.session() as session:
            result = await session.execute(
                select(DBCachedRecording).where(
                    DBCachedRecording.recording_id == canonical_id
                )
            )
            db_row = result.scalar_one_or_none()
            recording = RecordingMapper.to_domain(db_row) if db_row else None

        if recording is None:
            logger.debug(f"Cache miss for recording (recording ID: {canonical_id})")
            return None

        if self.policy.is_stale(recording.cached_at):
            logger.info(
                f"Found stale recording cache entry (recording ID: {canonical_id}), deleting"
            )
            self.store.spawn(
                self._delete_expired(canonical_id, self.policy.cutoff()),
                name=f"delete-recording-{canonical_id}",
            )
            return None

        logger.info(f"Cache hit for recording (recording ID: {canonical_id})")
        return recording

    @resilient_operation("recording_cache_put", fallback=None)
    async def put(self, recording: CachedRecording) -> None:
        """Insert or replace the cached recording under its canonical ID."""
        canonical_id = canonical_recording_id(recording.recording_id)
        if canonical_id is None:
            logger.warning(
                f"Refusing to cache recording with invalid recording ID: {recording.recording_id!r}"
            )
            return

        values = RecordingMapper.to_values(
            recording.with_recording_id(canonical_id), self.policy.now()
        )
        async with self.store.session() as session:
            await upsert_row(session, DBCachedRecording, values, ["recording_id"])
        logger.info(f"Cached recording (recording ID: {canonical_id})")

    @resilient_operation("recording_cache_delete", fallback=False)
    async def delete(self, recording_id: str) -> bool:
        """Remove the row for this recording. Returns whether a row was deleted."""
        canonical_id = canonical_recording_id(recording_id)
        if canonical_id is None:
            return False

        async with self.store.session() as session:
            result = await session.execute(
                delete(DBCachedRecording).where(
                    DBCachedRecording.recording_id == canonical_id
                )
            )
        deleted = bool(result.rowcount)
        if deleted:
            logger.info(f"Deleted recording cache entry (recording ID: {canonical_id})")
        return deleted

    @resilient_operation("recording_cache_delete_expired", fallback=False)
    async def _delete_expired(self, canonical_id: str, cutoff: datetime) -> bool:
        """Remove the row only if it is still older than `cutoff`."""
        async with self.store.session() as session:
            result = await session.execute(
                delete(DBCachedRecording).where(
                    DBCachedRecording.recording_id == canonical_id,
                    DBCachedRecording.cached_at < cutoff,
                )
            )
        deleted = bool(result.rowcount)
        if deleted:
            logger.info(
                f"Deleted stale recording cache entry (recording ID: {canonical_id})"
            )
        return deleted
