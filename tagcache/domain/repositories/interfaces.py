"""Domain cache interfaces.

These protocols define the contracts the lookup workflow depends on, without
depending on the SQLite implementation.
"""

from collections.abc import Awaitable, Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from tagcache.domain.entities import (
        CachedFingerprintLookup,
        CachedRecording,
        RecordingIdScore,
    )


class FingerprintCacheProtocol(Protocol):
    """Cache of fingerprint identification results keyed by (fingerprint, duration)."""

    def get(
        self, fingerprint: str, duration: int
    ) -> Awaitable["CachedFingerprintLookup | None"]:
        """Return the fresh cached result, or None on miss or staleness."""
        ...

    def put(
        self,
        fingerprint: str,
        duration: int,
        candidates: Sequence["RecordingIdScore"],
    ) -> Awaitable[None]:
        """Insert or replace the cached result. Never raises."""
        ...


class RecordingCacheProtocol(Protocol):
    """Cache of recording metadata keyed by canonical recording ID."""

    def get(self, recording_id: str) -> Awaitable["CachedRecording | None"]:
        """Return the fresh cached recording, or None on miss, staleness or bad ID."""
        ...

    def put(self, recording: "CachedRecording") -> Awaitable[None]:
        """Insert or replace the cached recording. Never raises."""
        ...
