"""Fingerprint identification entities.

Value objects for results of the acoustic fingerprint identification service
as they are held in the local cache.
"""

from datetime import UTC, datetime

from attrs import define, field, validators


@define(frozen=True, slots=True)
class RecordingIdScore:
    """One recording candidate returned for a fingerprint, with its match score."""

    recording_id: str = field(validator=validators.instance_of(str))
    score: float = field(
        converter=float,
        validator=[validators.ge(0.0), validators.le(1.0)],
    )


@define(frozen=True, slots=True)
class CachedFingerprintLookup:
    """Cached identification result for a single fingerprint observation.

    The (fingerprint, duration) pair is the cache key. Candidates keep the
    order the identification service returned them in.
    """

    fingerprint: str = field(validator=validators.instance_of(str))
    duration: int = field(validator=validators.instance_of(int))
    candidates: list[RecordingIdScore] = field(
        factory=list,
        validator=validators.deep_iterable(
            member_validator=validators.instance_of(RecordingIdScore),
        ),
    )
    cached_at: datetime = field(factory=lambda: datetime.now(UTC))

    @property
    def recording_ids(self) -> list[str]:
        """Candidate recording IDs in stored order."""
        return [candidate.recording_id for candidate in self.candidates]

    def best_candidate(self) -> RecordingIdScore | None:
        """Highest scoring candidate, or None when there are none."""
        if not self.candidates:
            return None
        return max(self.candidates, key=lambda candidate: candidate.score)
