"""Recording metadata entities.

Immutable value tree describing a recording as returned by the music metadata
service: artist credits, releases, their media and tracks. Optional scalars
use None for "known absent"; nested collections are always lists.
"""

from datetime import UTC, datetime

import attrs
from attrs import define, field, validators


@define(frozen=True, slots=True)
class ArtistCredit:
    """One artist in a recording's credit, with the phrase joining it to the next."""

    name: str = field(default="", validator=validators.instance_of(str))
    join_phrase: str = field(default="", validator=validators.instance_of(str))


@define(frozen=True, slots=True)
class Rating:
    """Community rating of a recording."""

    value: float | None = field(default=None)
    votes_count: int = field(default=0, validator=validators.instance_of(int))


@define(frozen=True, slots=True)
class TrackInfo:
    """A track on a medium, pointing at the recording it plays."""

    id: str = ""
    title: str = ""
    number: str = ""  # e.g. "3" or "A1"
    length_ms: int = 0
    recording_id: str | None = None


@define(frozen=True, slots=True)
class Medium:
    """A disc, side or file set within a release."""

    format: str | None = None
    track_count: int = 0
    tracks: list[TrackInfo] = field(factory=list)


@define(frozen=True, slots=True)
class ReleaseInfo:
    """A release the recording appears on."""

    id: str = ""
    title: str = ""
    release_date: str | None = None  # "YYYY", "YYYY-MM" or "YYYY-MM-DD"
    status: str | None = None
    barcode: str | None = None
    country_code: str | None = None
    media: list[Medium] = field(factory=list)

    @property
    def track_count(self) -> int:
        return sum(medium.track_count for medium in self.media)


@define(frozen=True, slots=True)
class CachedRecording:
    """Cached recording metadata keyed by its recording ID."""

    recording_id: str = field(validator=validators.instance_of(str))
    title: str = field(default="", validator=validators.instance_of(str))
    artist_credit_name: str = field(default="", validator=validators.instance_of(str))
    all_artist_names: list[str] = field(factory=list)
    album_title: str | None = None
    release_date: str | None = None
    disambiguation: str | None = None
    isrcs: list[str] = field(factory=list)
    rating: Rating | None = None
    artist_credits: list[ArtistCredit] = field(
        factory=list,
        validator=validators.deep_iterable(
            member_validator=validators.instance_of(ArtistCredit),
        ),
    )
    releases: list[ReleaseInfo] = field(
        factory=list,
        validator=validators.deep_iterable(
            member_validator=validators.instance_of(ReleaseInfo),
        ),
    )
    cached_at: datetime = field(factory=lambda: datetime.now(UTC))

    @property
    def display_artist(self) -> str:
        """Full credited artist string, e.g. "Artist A feat. Artist B"."""
        if not self.artist_credits:
            return self.artist_credit_name
        return "".join(
            f"{credit.name}{credit.join_phrase}" for credit in self.artist_credits
        )

    def with_recording_id(self, recording_id: str) -> "CachedRecording":
        """Create a copy keyed by a different (usually canonicalized) ID."""
        return attrs.evolve(self, recording_id=recording_id)

    def with_cached_at(self, cached_at: datetime) -> "CachedRecording":
        """Create a copy stamped with the given write time."""
        return attrs.evolve(self, cached_at=cached_at)
