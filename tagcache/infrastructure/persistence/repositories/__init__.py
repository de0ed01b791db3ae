"""Cache repositories for fingerprint and recording lookups."""

from .fingerprint import FingerprintCache
from .mappers import FingerprintLookupMapper, RecordingMapper
from .recording import RecordingCache

__all__ = [
    "FingerprintCache",
    "FingerprintLookupMapper",
    "RecordingCache",
    "RecordingMapper",
]
