"""Fingerprint identification cache.

Keyed by the exact (fingerprint, duration) pair. Reads and writes are best
effort: storage failures are logged and reported as a miss or a no-op.
"""

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import delete, select

from tagcache.config import get_logger, resilient_operation, settings
from tagcache.domain.entities import CachedFingerprintLookup, RecordingIdScore
from tagcache.infrastructure.persistence.database.db_connection import CacheStore
from tagcache.infrastructure.persistence.database.db_models import DBFingerprintLookup
from tagcache.infrastructure.persistence.repositories.base_repo import upsert_row
from tagcache.infrastructure.persistence.repositories.mappers import (
    FingerprintLookupMapper,
    coerce_candidate,
)
from tagcache.infrastructure.services.expiry_policy import ExpiryPolicy

logger = get_logger(__name__).bind(service="acoustid_cache")


class FingerprintCache:
    """Cache of identification candidates per fingerprint observation."""

    def __init__(
        self,
        store: CacheStore,
        policy: ExpiryPolicy | None = None,
        store_empty_results: bool | None = None,
    ) -> None:
        """Initialize with an open cache store.

        Args:
            store: Open cache store owning the connection.
            policy: Expiry policy; defaults to the store's.
            store_empty_results: Whether to cache lookups with no candidates.
                Defaults to the `cache.store_empty_fingerprint_results` setting.
        """
        self.store = store
        self.policy = policy or store.policy
        self.store_empty_results = (
            settings.cache.store_empty_fingerprint_results
            if store_empty_results is None
            else store_empty_results
        )

    @resilient_operation("fingerprint_cache_get", fallback=None)
    async def get(self, fingerprint: str, duration: int) -> CachedFingerprintLookup | None:
        """Return the fresh cached result for this fingerprint, or None.

        A stale row is reported as a miss and deleted in the background.
        """
        logger.debug(
            f"Retrieving AcoustID result from cache (fingerprint: {fingerprint}, duration: {duration})"
        )
        async with self.store.session() as session:
            result = await session.execute(
                select(DBFingerprintLookup).where(
                    DBFingerprintLookup.fingerprint == fingerprint,
                    DBFingerprintLookup.duration == duration,
                )
            )
            db_row = result.scalar_one_or_none()
            lookup = FingerprintLookupMapper.to_domain(db_row) if db_row else None

        if lookup is None:
            logger.debug(f"Cache miss for AcoustID result (fingerprint: {fingerprint})")
            return None

        if self.policy.is_stale(lookup.cached_at):
            logger.info(
                f"Found stale AcoustID cache entry (fingerprint: {fingerprint}), deleting"
            )
            self.store.spawn(
                self._delete_expired(fingerprint, duration, self.policy.cutoff()),
                name=f"delete-acoustid-{fingerprint[:16]}-{duration}",
            )
            return None

        logger.info(f"Cache hit for AcoustID result (fingerprint: {fingerprint})")
        return lookup

    @resilient_operation("fingerprint_cache_put", fallback=None)
    async def put(
        self,
        fingerprint: str,
        duration: int,
        candidates: Iterable[RecordingIdScore | tuple[str, float]],
    ) -> None:
        """Insert or replace the cached candidates for this fingerprint."""
        scores = [coerce_candidate(candidate) for candidate in candidates]
        if not scores and not self.store_empty_results:
            logger.debug(
                f"No recording IDs to cache for AcoustID result (fingerprint: {fingerprint})"
            )
            return

        values = FingerprintLookupMapper.to_values(
            fingerprint, duration, scores, self.policy.now()
        )
        async with self.store.session() as session:
            await upsert_row(
                session, DBFingerprintLookup, values, ["fingerprint", "duration"]
            )
        logger.info(
            f"Cached AcoustID result with {len(scores)} candidates (fingerprint: {fingerprint})"
        )

    @resilient_operation("fingerprint_cache_delete", fallback=False)
    async def delete(self, fingerprint: str, duration: int) -> bool:
        """Remove the row for this key. Returns whether a row was deleted."""
        async with self.store.session() as session:
            result = await session.execute(
                delete(DBFingerprintLookup).where(
                    DBFingerprintLookup.fingerprint == fingerprint,
                    DBFingerprintLookup.duration == duration,
                )
            )
        deleted = bool(result.rowcount)
        logger.info(
            f"Deleted AcoustID cache entry (fingerprint: {fingerprint}, duration: {duration})"
            if deleted
            else f"No AcoustID cache entry to delete (fingerprint: {fingerprint})"
        )
        return deleted

    @resilient_operation("fingerprint_cache_delete_expired", fallback=False)
    async def _delete_expired(
        self, fingerprint: str, duration: int, cutoff: datetime
    ) -> bool:
        """Remove the row only if it is still older than `cutoff`.

        A row rewritten after the stale read carries a newer timestamp and
        is kept.
        """
        async with self.store.session() as session:
            result = await session.execute(
                delete(DBFingerprintLookup).where(
                    DBFingerprintLookup.fingerprint == fingerprint,
                    DBFingerprintLookup.duration == duration,
                    DBFingerprintLookup.cached_at < cutoff,
                )
            )
        deleted = bool(result.rowcount)
        if deleted:
            logger.info(
                f"Deleted stale AcoustID cache entry (fingerprint: {fingerprint}, duration: {duration})"
            )
        return deleted
