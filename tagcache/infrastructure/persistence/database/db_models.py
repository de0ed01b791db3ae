"""SQLAlchemy database models for the lookup cache.

Two independent key/value tables: one for fingerprint identification results,
one for recording metadata. Nested values live in JSON columns under the key's
row; they are not separately queryable.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Float, Integer, MetaData, String, Text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from tagcache.config import get_logger

logger = get_logger(__name__)

# Define naming convention for constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",  # Index
    "uq": "uq_%(table_name)s_%(column_0_label)s",  # Unique constraint
    "ck": "ck_%(table_name)s_%(constraint_name)s",  # Check constraint
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",  # Foreign key
    "pk": "pk_%(table_name)s",  # Primary key
}

metadata = MetaData(naming_convention=convention)


class CacheDBBase(AsyncAttrs, DeclarativeBase):
    """Base class for cache tables."""

    metadata = metadata


class DBFingerprintLookup(CacheDBBase):
    """Identification candidates for one (fingerprint, duration) observation."""

    __tablename__ = "acoustid_cache"

    fingerprint: Mapped[str] = mapped_column(Text, primary_key=True)
    duration: Mapped[int] = mapped_column(Integer, primary_key=True)
    # [{"recording_id": str, "score": float}, ...]
    recording_id_scores: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    cached_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        index=True,
    )


class DBCachedRecording(CacheDBBase):
    """Flattened recording metadata keyed by canonical recording ID."""

    __tablename__ = "musicbrainz_cache"

    recording_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str | None] = mapped_column(Text)
    artist_credit_name: Mapped[str | None] = mapped_column(Text)
    all_artist_names: Mapped[list[str]] = mapped_column(JSON, default=list)
    album_title: Mapped[str | None] = mapped_column(Text)
    release_date: Mapped[str | None] = mapped_column(String(32))
    disambiguation: Mapped[str | None] = mapped_column(Text)
    isrcs: Mapped[list[str]] = mapped_column(JSON, default=list)
    user_rating: Mapped[float | None] = mapped_column(Float)
    user_rating_count: Mapped[int | None] = mapped_column(Integer)
    artist_credits: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    releases: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    cached_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        index=True,
    )


CACHE_MODELS: tuple[type[CacheDBBase], ...] = (DBFingerprintLookup, DBCachedRecording)


def init_schema(conn: Connection) -> None:
    """Create cache tables and their cached_at indexes if they don't exist.

    Safe to run on every startup; existing tables and rows are left untouched.
    Meant for `AsyncConnection.run_sync`.
    """
    metadata.create_all(conn, checkfirst=True)
    logger.debug(
        "Cache schema verified: {}",
        ", ".join(model.__tablename__ for model in CACHE_MODELS),
    )
