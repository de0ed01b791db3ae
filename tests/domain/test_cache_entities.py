"""Tests for cache domain entities.

These tests verify that the value objects validate their inputs and that the
recording ID helper canonicalizes every spelling the metadata service emits.
"""

from datetime import UTC, datetime, timedelta, timezone
import uuid

import attrs
import pytest

from tagcache.domain.entities import (
    ArtistCredit,
    CachedFingerprintLookup,
    CachedRecording,
    Medium,
    RecordingIdScore,
    ReleaseInfo,
    canonical_recording_id,
    ensure_utc,
)

CANONICAL = "b1a9c0e9-d987-4042-ae91-78d6a3267d69"


class TestCanonicalRecordingId:
    """Test recording identifier normalization."""

    @pytest.mark.parametrize(
        "raw",
        [
            CANONICAL,
            CANONICAL.upper(),
            f"{{{CANONICAL}}}",
            f"urn:uuid:{CANONICAL}",
            CANONICAL.replace("-", ""),
            f"  {CANONICAL}\n",
        ],
    )
    def test_spellings_collapse_to_canonical_form(self, raw):
        assert canonical_recording_id(raw) == CANONICAL

    def test_uuid_instance_is_accepted(self):
        assert canonical_recording_id(uuid.UUID(CANONICAL)) == CANONICAL

    @pytest.mark.parametrize("raw", ["", "   ", "not-a-uuid", "1234", None, 42])
    def test_unparsable_values_return_none(self, raw):
        assert canonical_recording_id(raw) is None


class TestEnsureUtc:
    def test_naive_datetime_gets_utc(self):
        naive = datetime(2024, 1, 1, 12, 0)
        assert ensure_utc(naive).tzinfo is UTC

    def test_aware_datetime_is_untouched(self):
        plus_two = datetime(2024, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        assert ensure_utc(plus_two) is plus_two

    def test_none_passes_through(self):
        assert ensure_utc(None) is None


class TestFingerprintEntities:
    """Test fingerprint lookup value objects."""

    def test_score_is_converted_to_float(self):
        candidate = RecordingIdScore(recording_id="r1", score=1)
        assert candidate.score == 1.0
        assert isinstance(candidate.score, float)

    @pytest.mark.parametrize("score", [-0.01, 1.01])
    def test_score_outside_unit_interval_is_rejected(self, score):
        with pytest.raises(ValueError):
            RecordingIdScore(recording_id="r1", score=score)

    def test_candidates_must_be_scores(self):
        with pytest.raises(TypeError):
            CachedFingerprintLookup(
                fingerprint="AB12", duration=180, candidates=[("r1", 0.9)]
            )

    def test_best_candidate_and_recording_ids(self):
        lookup = CachedFingerprintLookup(
            fingerprint="AB12",
            duration=180,
            candidates=[
                RecordingIdScore("r2", 0.40),
                RecordingIdScore("r1", 0.95),
            ],
        )
        assert lookup.recording_ids == ["r2", "r1"]
        assert lookup.best_candidate() == RecordingIdScore("r1", 0.95)

    def test_best_candidate_of_empty_lookup_is_none(self):
        lookup = CachedFingerprintLookup(fingerprint="AB12", duration=180)
        assert lookup.best_candidate() is None
        assert lookup.cached_at.tzinfo is not None

    def test_entities_are_frozen(self):
        candidate = RecordingIdScore("r1", 0.5)
        with pytest.raises(attrs.exceptions.FrozenInstanceError):
            candidate.score = 0.6


class TestRecordingEntities:
    """Test recording metadata value objects."""

    def test_defaults_are_empty_not_shared(self):
        first = CachedRecording(recording_id=CANONICAL)
        second = CachedRecording(recording_id=CANONICAL)
        assert first.isrcs == [] and first.releases == []
        assert first.isrcs is not second.isrcs
        assert first.rating is None
        assert first.album_title is None

    def test_display_artist_joins_credits(self):
        recording = CachedRecording(
            recording_id=CANONICAL,
            artist_credit_name="Artist A",
            artist_credits=[
                ArtistCredit(name="Artist A", join_phrase=" feat. "),
                ArtistCredit(name="Artist B"),
            ],
        )
        assert recording.display_artist == "Artist A feat. Artist B"

    def test_display_artist_falls_back_to_primary_name(self):
        recording = CachedRecording(recording_id=CANONICAL, artist_credit_name="Solo")
        assert recording.display_artist == "Solo"

    def test_release_track_count_sums_media(self):
        release = ReleaseInfo(
            id="rel", media=[Medium(track_count=10), Medium(track_count=8)]
        )
        assert release.track_count == 18

    def test_with_helpers_return_copies(self, sample_recording):
        moment = datetime(2024, 5, 1, tzinfo=UTC)
        stamped = sample_recording.with_cached_at(moment).with_recording_id("x")
        assert stamped.cached_at == moment
        assert stamped.recording_id == "x"
        assert sample_recording.recording_id == CANONICAL
        assert stamped.releases == sample_recording.releases

    def test_releases_must_be_release_info(self):
        with pytest.raises(TypeError):
            CachedRecording(recording_id=CANONICAL, releases=[{"id": "rel"}])
