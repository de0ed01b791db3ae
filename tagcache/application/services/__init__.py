"""Application services."""

from .lookup_service import CachedLookupService, LookupStats

__all__ = ["CachedLookupService", "LookupStats"]
