"""MusicBrainz recording payload adapter.

Converts a recording lookup result into a `CachedRecording`. Two payload
shapes are understood:

- the `musicbrainzngs` dict shape (``artist-credit`` mixing credit dicts and
  join-phrase strings, ``release-list``/``medium-list``/``track-list``,
  ``isrc-list``, string numbers);
- the ws/2 JSON shape (``joinphrase`` inside each credit, ``releases``/
  ``media``/``tracks``, ``isrcs``, numeric values).

Missing optional fields become None; missing collections become empty lists.
"""

from collections.abc import Mapping
from typing import Any

from tagcache.config import get_logger
from tagcache.domain.entities import (
    ArtistCredit,
    CachedRecording,
    Medium,
    Rating,
    ReleaseInfo,
    TrackInfo,
)

logger = get_logger(__name__).bind(service="musicbrainz")


def recording_from_musicbrainz(payload: Mapping[str, Any]) -> CachedRecording:
    """Build a cacheable recording from a MusicBrainz recording payload.

    Args:
        payload: Either ``{"recording": {...}}`` as returned by
            ``musicbrainzngs.get_recording_by_id`` or the bare recording dict.

    Raises:
        ValueError: If the payload carries no recording ID.
    """
    recording = payload.get("recording", payload)
    recording_id = recording.get("id")
    if not recording_id:
        raise ValueError("MusicBrainz recording payload has no 'id'")

    artist_credits = _artist_credits(recording.get("artist-credit") or [])
    releases = [
        _release(item)
        for item in recording.get("release-list") or recording.get("releases") or []
    ]
    first_release = releases[0] if releases else None

    return CachedRecording(
        recording_id=str(recording_id),
        title=recording.get("title") or "",
        artist_credit_name=artist_credits[0].name if artist_credits else "",
        all_artist_names=[credit.name for credit in artist_credits],
        album_title=first_release.title if first_release else None,
        release_date=first_release.release_date if first_release else None,
        disambiguation=recording.get("disambiguation") or None,
        isrcs=_isrcs(recording.get("isrc-list") or recording.get("isrcs") or []),
        rating=_rating(recording.get("rating")),
        artist_credits=artist_credits,
        releases=releases,
    )


def _artist_credits(raw: list[Any]) -> list[ArtistCredit]:
    """Normalize both credit shapes into name/join-phrase pairs."""
    credits: list[ArtistCredit] = []
    for item in raw:
        if isinstance(item, str):
            # musicbrainzngs puts the join phrase between credit dicts
            if credits:
                last = credits[-1]
                credits[-1] = ArtistCredit(
                    name=last.name, join_phrase=last.join_phrase + item
                )
            continue

        artist = item.get("artist") or {}
        name = item.get("name") or artist.get("name") or ""
        credits.append(ArtistCredit(name=name, join_phrase=item.get("joinphrase") or ""))
    return credits


def _isrcs(raw: list[Any]) -> list[str]:
    return [item["id"] if isinstance(item, dict) else str(item) for item in raw]


def _rating(raw: Mapping[str, Any] | None) -> Rating | None:
    if not raw:
        return None
    value = raw.get("rating", raw.get("value"))
    return Rating(
        value=float(value) if value is not None else None,
        votes_count=_to_int(raw.get("votes-count")),
    )


def _release(raw: Mapping[str, Any]) -> ReleaseInfo:
    return ReleaseInfo(
        id=str(raw.get("id") or ""),
        title=raw.get("title") or "",
        release_date=raw.get("date") or None,
        status=raw.get("status") or None,
        barcode=raw.get("barcode") or None,
        country_code=raw.get("country") or None,
        media=[
            _medium(item)
            for item in raw.get("medium-list") or raw.get("media") or []
        ],
    )


def _medium(raw: Mapping[str, Any]) -> Medium:
    tracks = [_track(item) for item in raw.get("track-list") or raw.get("tracks") or []]
    track_count = raw.get("track-count")
    return Medium(
        format=raw.get("format") or None,
        track_count=_to_int(track_count) if track_count is not None else len(tracks),
        tracks=tracks,
    )


def _track(raw: Mapping[str, Any]) -> TrackInfo:
    recording = raw.get("recording") or {}
    return TrackInfo(
        id=str(raw.get("id") or ""),
        title=raw.get("title") or recording.get("title") or "",
        number=str(raw.get("number") or ""),
        length_ms=_to_int(raw.get("length") or recording.get("length")),
        recording_id=recording.get("id"),
    )


def _to_int(value: Any) -> int:
    """Parse MusicBrainz numbers, which musicbrainzngs returns as strings."""
    if value is None or value == "":
        return 0
    try:
        return int(float(value))
    except (TypeError, ValueError):
        logger.debug(f"Ignoring non-numeric MusicBrainz value {value!r}")
        return 0
