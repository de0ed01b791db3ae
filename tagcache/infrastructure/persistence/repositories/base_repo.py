"""Shared helpers for cache repositories."""

from typing import Any

from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from tagcache.infrastructure.persistence.database.db_models import CacheDBBase


async def upsert_row(
    session: AsyncSession,
    model_class: type[CacheDBBase],
    values: dict[str, Any],
    lookup_keys: list[str],
) -> None:
    """Insert a row or fully replace the existing row with the same key.

    Every non-key column present in `values` is overwritten, so a replacement
    never merges with what was stored before.
    """
    stmt = sqlite_insert(model_class).values(**values)

    update_keys = set(values) - set(lookup_keys)
    update_dict = {key: getattr(stmt.excluded, key) for key in update_keys}

    stmt = stmt.on_conflict_do_update(
        index_elements=[getattr(model_class, key) for key in lookup_keys],
        set_=update_dict,
    )
    await session.execute(stmt)
