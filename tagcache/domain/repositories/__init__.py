"""Domain repository interfaces."""

from .interfaces import FingerprintCacheProtocol, RecordingCacheProtocol

__all__ = ["FingerprintCacheProtocol", "RecordingCacheProtocol"]
