"""Mappers between cache domain entities and database rows.

Nested recording structures are flattened to plain JSON-compatible dicts on
the way in and rebuilt into the typed value tree on the way out.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

import attrs

from tagcache.domain.entities import (
    ArtistCredit,
    CachedFingerprintLookup,
    CachedRecording,
    Medium,
    Rating,
    RecordingIdScore,
    ReleaseInfo,
    TrackInfo,
    ensure_utc,
)
from tagcache.infrastructure.persistence.database.db_models import (
    DBCachedRecording,
    DBFingerprintLookup,
)


def coerce_candidate(candidate: RecordingIdScore | tuple[str, float]) -> RecordingIdScore:
    """Accept either a RecordingIdScore or a (recording_id, score) pair."""
    if isinstance(candidate, RecordingIdScore):
        return candidate
    recording_id, score = candidate
    return RecordingIdScore(recording_id=recording_id, score=score)


class FingerprintLookupMapper:
    """Bidirectional mapper for fingerprint identification rows."""

    @staticmethod
    def to_values(
        fingerprint: str,
        duration: int,
        candidates: Iterable[RecordingIdScore],
        cached_at: datetime,
    ) -> dict[str, Any]:
        """Column values for an upsert."""
        return {
            "fingerprint": fingerprint,
            "duration": duration,
            "recording_id_scores": [
                {"recording_id": c.recording_id, "score": c.score} for c in candidates
            ],
            "cached_at": cached_at,
        }

    @staticmethod
    def to_domain(db_model: DBFingerprintLookup) -> CachedFingerprintLookup:
        """Convert a database row to the domain entity."""
        return CachedFingerprintLookup(
            fingerprint=db_model.fingerprint,
            duration=db_model.duration,
            candidates=[
                RecordingIdScore(recording_id=item["recording_id"], score=item["score"])
                for item in db_model.recording_id_scores or []
            ],
            cached_at=ensure_utc(db_model.cached_at),
        )


class RecordingMapper:
    """Bidirectional mapper for recording metadata rows."""

    @staticmethod
    def to_values(recording: CachedRecording, cached_at: datetime) -> dict[str, Any]:
        """Column values for an upsert. Absent optionals are explicit None."""
        rating = recording.rating
        return {
            "recording_id": recording.recording_id,
            "title": recording.title,
            "artist_credit_name": recording.artist_credit_name,
            "all_artist_names": list(recording.all_artist_names),
            "album_title": recording.album_title,
            "release_date": recording.release_date,
            "disambiguation": recording.disambiguation,
            "isrcs": list(recording.isrcs),
            "user_rating": rating.value if rating else None,
            "user_rating_count": rating.votes_count if rating else None,
            "artist_credits": [attrs.asdict(c) for c in recording.artist_credits],
            "releases": [attrs.asdict(r) for r in recording.releases],
            "cached_at": cached_at,
        }

    @staticmethod
    def to_domain(db_model: DBCachedRecording) -> CachedRecording:
        """Convert a database row back into the typed value tree."""
        rating = None
        if db_model.user_rating is not None or db_model.user_rating_count is not None:
            rating = Rating(
                value=db_model.user_rating,
                votes_count=db_model.user_rating_count or 0,
            )

        return CachedRecording(
            recording_id=db_model.recording_id,
            title=db_model.title or "",
            artist_credit_name=db_model.artist_credit_name or "",
            all_artist_names=list(db_model.all_artist_names or []),
            album_title=db_model.album_title,
            release_date=db_model.release_date,
            disambiguation=db_model.disambiguation,
            isrcs=list(db_model.isrcs or []),
            rating=rating,
            artist_credits=[
                ArtistCredit(
                    name=item.get("name") or "",
                    join_phrase=item.get("join_phrase") or "",
                )
                for item in db_model.artist_credits or []
            ],
            releases=[_release_from_dict(item) for item in db_model.releases or []],
            cached_at=ensure_utc(db_model.cached_at),
        )


def _release_from_dict(data: dict[str, Any]) -> ReleaseInfo:
    return ReleaseInfo(
        id=data.get("id") or "",
        title=data.get("title") or "",
        release_date=data.get("release_date"),
        status=data.get("status"),
        barcode=data.get("barcode"),
        country_code=data.get("country_code"),
        media=[_medium_from_dict(item) for item in data.get("media") or []],
    )


def _medium_from_dict(data: dict[str, Any]) -> Medium:
    return Medium(
        format=data.get("format"),
        track_count=int(data.get("track_count") or 0),
        tracks=[_track_from_dict(item) for item in data.get("tracks") or []],
    )


def _track_from_dict(data: dict[str, Any]) -> TrackInfo:
    return TrackInfo(
        id=data.get("id") or "",
        title=data.get("title") or "",
        number=data.get("number") or "",
        length_ms=int(data.get("length_ms") or 0),
        recording_id=data.get("recording_id"),
    )
