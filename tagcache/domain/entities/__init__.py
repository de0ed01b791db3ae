"""Core domain entities for cached lookup results."""

from .lookup import CachedFingerprintLookup, RecordingIdScore
from .recording import (
    ArtistCredit,
    CachedRecording,
    Medium,
    Rating,
    ReleaseInfo,
    TrackInfo,
)
from .shared import canonical_recording_id, ensure_utc

__all__ = [
    # Fingerprint entities
    "CachedFingerprintLookup",
    "RecordingIdScore",
    # Recording entities
    "ArtistCredit",
    "CachedRecording",
    "Medium",
    "Rating",
    "ReleaseInfo",
    "TrackInfo",
    # Shared utilities
    "canonical_recording_id",
    "ensure_utc",
]
