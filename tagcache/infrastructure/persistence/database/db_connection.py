"""SQLite cache store handle.

This module is responsible for:
- Resolving and creating the cache directory and database file
- Engine creation and SQLite connection configuration
- Schema initialization and the startup expiry sweep
- Session management for single-key cache operations
- Tracking fire-and-forget background work (stale row deletion)
"""

import asyncio
from collections.abc import AsyncGenerator, Coroutine
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Self

from sqlalchemy import delete, event, func, select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from tagcache.config import get_logger, settings
from tagcache.config.settings import CacheConfig
from tagcache.infrastructure.persistence.database.db_models import (
    CACHE_MODELS,
    init_schema,
)
from tagcache.infrastructure.services.expiry_policy import ExpiryPolicy

logger = get_logger(__name__)


class CacheError(Exception):
    """Base class for cache errors."""


class CacheUnavailableError(CacheError):
    """The cache store could not be created, opened or initialized."""

    def __init__(self, db_path: Path, reason: str) -> None:
        self.db_path = db_path
        super().__init__(f"Cache store unavailable at {db_path}: {reason}")


def create_cache_engine(db_path: Path, config: CacheConfig | None = None) -> AsyncEngine:
    """Create async SQLAlchemy engine for the cache file.

    The pool holds a single connection: concurrent cache calls queue for it
    and SQLite serializes writes at file level.
    """
    config = config or settings.cache
    busy_timeout_ms = config.busy_timeout_ms

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{db_path}",
        pool_size=1,
        max_overflow=0,
        pool_timeout=max(busy_timeout_ms / 1000, 1.0),
        connect_args={"timeout": busy_timeout_ms / 1000},
        echo=config.echo,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, _):  # pragma: no cover
        """Set SQLite PRAGMAs on connection creation."""
        cursor = dbapi_connection.cursor()
        cursor.execute(f"PRAGMA busy_timeout = {int(busy_timeout_ms)}")
        cursor.execute("PRAGMA journal_mode = WAL")
        cursor.execute("PRAGMA synchronous = NORMAL")
        cursor.close()

    return engine


class CacheStore:
    """Owner of the cache database connection.

    Create with `await CacheStore.open(...)` and release with `close()`, or
    use it as an async context manager so the connection is released on
    every exit path:

        ```python
        async with await CacheStore.open() as store:
            fingerprints = FingerprintCache(store)
            ...
        ```
    """

    def __init__(self, engine: AsyncEngine, db_path: Path, policy: ExpiryPolicy) -> None:
        self._engine = engine
        self._session_factory = async_sessionmaker(
            bind=engine,
            expire_on_commit=False,
            autoflush=False,
        )
        self._background_tasks: set[asyncio.Task[Any]] = set()
        self._closed = False
        self.db_path = db_path
        self.policy = policy

    @classmethod
    async def open(
        cls,
        base_path: Path | str | None = None,
        *,
        config: CacheConfig | None = None,
        policy: ExpiryPolicy | None = None,
        sweep_on_open: bool = True,
    ) -> Self:
        """Open (creating if needed) the cache database under `base_path`.

        Creates the directory and file, ensures the schema, then runs the
        expiry sweep once unless `sweep_on_open` is False.

        Raises:
            CacheUnavailableError: If the directory, file or schema cannot be
                created. The store is never returned half-initialized.
        """
        config = config or settings.cache
        base = (
            Path(base_path).expanduser()
            if base_path is not None
            else config.resolve_base_path()
        )
        db_path = base / config.db_filename
        engine: AsyncEngine | None = None

        try:
            if not base.is_dir():
                base.mkdir(parents=True, exist_ok=True)
                logger.info(f"Created application data directory for cache: {base}")

            engine = create_cache_engine(db_path, config)
            async with engine.begin() as conn:
                await conn.run_sync(init_schema)
        except Exception as e:
            logger.opt(exception=e).error(
                f"Failed to initialize cache store at {db_path}: {e}"
            )
            if engine is not None:
                await engine.dispose()
            raise CacheUnavailableError(db_path, str(e)) from e

        logger.info(f"Opened SQLite cache at {db_path}")
        store = cls(engine, db_path, policy or ExpiryPolicy.from_settings(config))
        if sweep_on_open:
            await store.policy.sweep(store)
        return store

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending_tasks(self) -> int:
        return len(self._background_tasks)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """Session for one unit of work; commits on success, rolls back on error."""
        if self._closed:
            raise CacheError(f"Cache store at {self.db_path} is closed")

        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    def spawn(
        self, coro: Coroutine[Any, Any, Any], *, name: str | None = None
    ) -> asyncio.Task[Any] | None:
        """Run `coro` in the background without the caller awaiting it.

        Failures are logged by the done-callback and never reach the caller.
        Returns None (and discards the coroutine) once the store is closed.
        """
        if self._closed:
            coro.close()
            logger.debug(f"Cache store closed, dropping background task {name}")
            return None

        task = asyncio.create_task(coro, name=name)
        self._background_tasks.add(task)
        task.add_done_callback(self._on_background_done)
        return task

    def _on_background_done(self, task: asyncio.Task[Any]) -> None:
        self._background_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error(
                f"Background cache task {task.get_name()} failed: {exc}"
            )

    async def drain(self) -> None:
        """Wait for all pending background tasks to finish."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    async def row_counts(self) -> dict[str, int]:
        """Number of stored rows per cache table, stale rows included."""
        counts: dict[str, int] = {}
        async with self.session() as session:
            for model in CACHE_MODELS:
                result = await session.execute(select(func.count()).select_from(model))
                counts[model.__tablename__] = result.scalar_one()
        return counts

    async def clear(self) -> dict[str, int]:
        """Delete every row in both cache tables."""
        deleted: dict[str, int] = {}
        async with self.session() as session:
            for model in CACHE_MODELS:
                result = await session.execute(delete(model))
                deleted[model.__tablename__] = result.rowcount or 0
        logger.info(f"Cleared cache tables: {deleted}")
        return deleted

    async def close(self) -> None:
        """Finish background work and release the connection. Idempotent."""
        if self._closed:
            return
        logger.info(f"Closing SQLite cache at {self.db_path}")
        await self.drain()
        self._closed = True
        await self._engine.dispose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()


async def open_cache_store(
    base_path: Path | str | None = None,
    *,
    config: CacheConfig | None = None,
    policy: ExpiryPolicy | None = None,
    sweep_on_open: bool = True,
) -> CacheStore:
    """Open the cache store. See `CacheStore.open`."""
    return await CacheStore.open(
        base_path, config=config, policy=policy, sweep_on_open=sweep_on_open
    )
