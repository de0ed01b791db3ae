"""Cache-aside lookup workflow.

Item processing, duplicate detection and batch tagging all resolve audio the
same way: consult the cache, call the real service on a miss, then store the
answer for next time. This service captures that workflow on top of the two
cache protocols.
"""

from collections.abc import Awaitable, Callable, Sequence

from attrs import define, field

from tagcache.config import get_logger
from tagcache.domain.entities import (
    CachedFingerprintLookup,
    CachedRecording,
    RecordingIdScore,
    canonical_recording_id,
)
from tagcache.domain.repositories.interfaces import (
    FingerprintCacheProtocol,
    RecordingCacheProtocol,
)

logger = get_logger(__name__)

FingerprintFetcher = Callable[[str, int], Awaitable[Sequence[RecordingIdScore]]]
RecordingFetcher = Callable[[str], Awaitable[CachedRecording | None]]


@define(slots=True)
class LookupStats:
    """Hit/miss counters for one service instance."""

    fingerprint_hits: int = 0
    fingerprint_misses: int = 0
    recording_hits: int = 0
    recording_misses: int = 0

    @property
    def hit_rate(self) -> float:
        hits = self.fingerprint_hits + self.recording_hits
        total = hits + self.fingerprint_misses + self.recording_misses
        return hits / total if total else 0.0


@define(slots=True)
class CachedLookupService:
    """Resolve fingerprints and recordings through the local cache.

    Fetcher errors (network failures, rate limits) propagate to the caller;
    cache errors never do.
    """

    fingerprints: FingerprintCacheProtocol
    recordings: RecordingCacheProtocol
    stats: LookupStats = field(factory=LookupStats)

    async def identify(
        self, fingerprint: str, duration: int, fetch: FingerprintFetcher
    ) -> list[RecordingIdScore]:
        """Candidates for a fingerprint, from cache or from `fetch` on a miss."""
        cached: CachedFingerprintLookup | None = await self.fingerprints.get(
            fingerprint, duration
        )
        if cached is not None:
            self.stats.fingerprint_hits += 1
            return list(cached.candidates)

        self.stats.fingerprint_misses += 1
        logger.debug(f"Fingerprint cache miss, querying identification service ({duration}s)")
        candidates = list(await fetch(fingerprint, duration))
        await self.fingerprints.put(fingerprint, duration, candidates)
        return candidates

    async def recording(
        self, recording_id: str, fetch: RecordingFetcher
    ) -> CachedRecording | None:
        """Recording metadata from cache or from `fetch` on a miss.

        Returns None without calling `fetch` when the ID is not a valid
        recording identifier.
        """
        if canonical_recording_id(recording_id) is None:
            logger.warning(f"Skipping lookup for invalid recording ID: {recording_id!r}")
            return None

        cached = await self.recordings.get(recording_id)
        if cached is not None:
            self.stats.recording_hits += 1
            return cached

        self.stats.recording_misses += 1
        logger.debug(f"Recording cache miss, querying metadata service ({recording_id})")
        fetched = await fetch(recording_id)
        if fetched is not None:
            await self.recordings.put(fetched)
        return fetched

    async def recordings_for(
        self,
        fingerprint: str,
        duration: int,
        fetch_candidates: FingerprintFetcher,
        fetch_recording: RecordingFetcher,
        min_score: float = 0.0,
    ) -> list[tuple[RecordingIdScore, CachedRecording]]:
        """Identify a fingerprint and resolve each candidate's metadata.

        Candidates below `min_score` or whose metadata cannot be found are
        dropped. Results are ordered by descending score.
        """
        candidates = await self.identify(fingerprint, duration, fetch_candidates)
        resolved: list[tuple[RecordingIdScore, CachedRecording]] = []
        for candidate in sorted(candidates, key=lambda c: c.score, reverse=True):
            if candidate.score < min_score:
                continue
            recording = await self.recording(candidate.recording_id, fetch_recording)
            if recording is not None:
                resolved.append((candidate, recording))
        return resolved
