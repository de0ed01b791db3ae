"""Cache expiry policy.

Decides when a cached row is stale and removes expired rows in bulk. The
read-time check is authoritative: stale rows are never returned, whether or
not the sweep has removed them yet.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from attrs import define, field
from sqlalchemy import delete

from tagcache.config import get_logger, settings
from tagcache.config.settings import CacheConfig
from tagcache.domain.entities import ensure_utc
from tagcache.infrastructure.persistence.database.db_models import CACHE_MODELS

if TYPE_CHECKING:
    from tagcache.infrastructure.persistence.database.db_connection import CacheStore

logger = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


@define(frozen=True, slots=True)
class ExpiryPolicy:
    """Time-to-live policy shared by both cache tables.

    Attributes:
        ttl_days: Maximum age in days. Zero or negative disables expiry.
        clock: Source of the current time; must return UTC datetimes.
    """

    ttl_days: int = 30
    clock: Callable[[], datetime] = field(default=_utc_now, repr=False)

    @classmethod
    def from_settings(cls, config: CacheConfig | None = None) -> "ExpiryPolicy":
        """Build the policy from cache configuration."""
        config = config or settings.cache
        return cls(ttl_days=config.ttl_days)

    @property
    def enabled(self) -> bool:
        return self.ttl_days > 0

    def now(self) -> datetime:
        """Current time from the clock, converted to UTC."""
        return ensure_utc(self.clock()).astimezone(UTC)

    def cutoff(self) -> datetime | None:
        """Rows written before this instant are stale; None when expiry is off."""
        if not self.enabled:
            return None
        return self.now() - timedelta(days=self.ttl_days)

    def is_stale(self, cached_at: datetime) -> bool:
        """Whether a row written at `cached_at` is older than the TTL."""
        cutoff = self.cutoff()
        if cutoff is None:
            return False
        return ensure_utc(cached_at) < cutoff

    async def sweep(self, store: "CacheStore") -> dict[str, int]:
        """Delete every expired row in both cache tables.

        Failures are logged and reported as an empty result; stale rows then
        stay on disk until the next lazy check or the next sweep.

        Returns:
            Number of deleted rows per table name.
        """
        cutoff = self.cutoff()
        if cutoff is None:
            logger.debug("Cache expiry disabled, skipping sweep")
            return {}

        with logger.contextualize(operation="cache_sweep", ttl_days=self.ttl_days):
            logger.info(
                f"Cleaning up expired cache entries older than {self.ttl_days} days"
            )
            deleted: dict[str, int] = {}
            try:
                async with store.session() as session:
                    for model in CACHE_MODELS:
                        result = await session.execute(
                            delete(model).where(model.cached_at < cutoff)
                        )
                        deleted[model.__tablename__] = result.rowcount or 0
            except Exception as e:
                logger.opt(exception=e).error(f"Error during cache cleanup: {e}")
                return {}

            for table, count in deleted.items():
                logger.info(f"Deleted {count} expired entries from {table}")
            return deleted
