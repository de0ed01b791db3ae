"""Shared utilities and helper functions for domain entities.

Pure utility functions with zero external dependencies.
"""

from datetime import UTC, datetime
import uuid


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure datetime is timezone-aware with UTC."""
    if dt is None:
        return None
    return dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt


def canonical_recording_id(value: object) -> str | None:
    """Normalize a recording identifier to its canonical textual form.

    Accepts any spelling `uuid.UUID` understands (hyphenated, bare hex,
    braces, ``urn:uuid:`` prefix, any case) and returns the lower-case
    hyphenated form. Returns None when the value cannot be parsed.
    """
    if isinstance(value, uuid.UUID):
        return str(value)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return str(uuid.UUID(value.strip()))
    except ValueError:
        return None
