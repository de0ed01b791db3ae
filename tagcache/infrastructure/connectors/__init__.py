"""Adapters from external service results to cacheable entities."""

from .acoustid import candidates_from_acoustid
from .musicbrainz import recording_from_musicbrainz

__all__ = ["candidates_from_acoustid", "recording_from_musicbrainz"]
