"""tagcache domain layer - pure value objects with no storage dependencies."""

from . import entities, repositories
from .entities import (
    ArtistCredit,
    CachedFingerprintLookup,
    CachedRecording,
    Medium,
    Rating,
    RecordingIdScore,
    ReleaseInfo,
    TrackInfo,
    canonical_recording_id,
)

__all__ = [
    "entities",
    "repositories",
    "ArtistCredit",
    "CachedFingerprintLookup",
    "CachedRecording",
    "Medium",
    "Rating",
    "RecordingIdScore",
    "ReleaseInfo",
    "TrackInfo",
    "canonical_recording_id",
]
