"""tagcache - persistent lookup cache for fingerprint and recording metadata.

Quick Start:
-----------
```python
from tagcache import CacheStore, FingerprintCache, RecordingCache

async with await CacheStore.open() as store:
    fingerprints = FingerprintCache(store)
    recordings = RecordingCache(store)

    cached = await fingerprints.get(fingerprint, duration)
    if cached is None:
        candidates = await identify_remotely(fingerprint, duration)
        await fingerprints.put(fingerprint, duration, candidates)
```
"""

from tagcache.infrastructure.persistence.database.db_connection import (
    CacheError,
    CacheStore,
    CacheUnavailableError,
    open_cache_store,
)
from tagcache.infrastructure.persistence.repositories import (
    FingerprintCache,
    RecordingCache,
)
from tagcache.infrastructure.services.expiry_policy import ExpiryPolicy

__all__ = [
    "CacheError",
    "CacheStore",
    "CacheUnavailableError",
    "ExpiryPolicy",
    "FingerprintCache",
    "RecordingCache",
    "open_cache_store",
]
