"""
Alias-switch locks shared between processes through PostgreSQL.

Each held lock is a session-level advisory lock on its own database
session. PostgreSQL drops the lock when the session ends, so a worker that
dies mid-switch cannot leave the alias locked.

Usage:
    >>> engine = create_async_engine("postgresql+asyncpg://localhost/app")
    >>> locks = PostgreSQLLockManager(async_sessionmaker(engine))
    >>> repo = AliasingElasticsearchReadModelRepository(
    ...     client, OrderSummary, "orders", lock_manager=locks, lock_timeout=30.0
    ... )
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from esreadmodels.locks.interface import LockAcquisitionError, LockInfo
from esreadmodels.observability import Tracer, create_tracer
from esreadmodels.observability.attributes import ATTR_LOCK_KEY, ATTR_LOCK_TIMEOUT

logger = logging.getLogger(__name__)

_LOCK = text("SELECT pg_advisory_lock(:lock_id)")
_TRY_LOCK = text("SELECT pg_try_advisory_lock(:lock_id)")
_UNLOCK = text("SELECT pg_advisory_unlock(:lock_id)")


def advisory_lock_id(key: str) -> int:
    """
    Map a lock key onto the signed 64-bit id space of advisory locks.

    Example:
        >>> advisory_lock_id("alias-switch:orders") == advisory_lock_id("alias-switch:orders")
        True
    """
    digest = hashlib.blake2b(key.encode(), digest_size=8).digest()
    return int.from_bytes(digest, "big", signed=True)


class PostgreSQLLockManager:
    """
    LockManager backed by PostgreSQL advisory locks.

    Without a timeout, ``acquire`` blocks inside PostgreSQL until the lock
    is free. With one, it polls ``pg_try_advisory_lock`` every
    ``poll_interval`` seconds until the deadline.

    Note:
        Every held lock pins one pooled connection until it is released.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        holder_id: str | None = None,
        poll_interval: float = 0.1,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        self._session_factory = session_factory
        self._holder_id = holder_id
        self._poll_interval = poll_interval
        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._held: set[str] = set()

    @asynccontextmanager
    async def acquire(
        self,
        key: str,
        *,
        timeout: float | None = None,
    ) -> AsyncIterator[LockInfo]:
        """
        Hold the advisory lock for ``key`` for the duration of the block.

        Raises:
            LockAcquisitionError: On timeout or when the database fails
        """
        lock_id = advisory_lock_id(key)

        with self._tracer.span(
            "esreadmodels.lock.acquire",
            {ATTR_LOCK_KEY: key, ATTR_LOCK_TIMEOUT: -1 if timeout is None else timeout},
        ):
            session = self._session_factory()
            try:
                acquired = await self._lock(session, lock_id, timeout)
            except SQLAlchemyError as e:
                await session.close()
                raise LockAcquisitionError(key=key, reason=f"Database error: {e}") from e
            if not acquired:
                await session.close()
                raise LockAcquisitionError(
                    key=key, reason=f"Timeout after {timeout}s", timeout=timeout
                )

        self._held.add(key)
        logger.debug(
            "Acquired advisory lock %s (%d)", key, lock_id, extra={"lock_key": key}
        )
        try:
            yield LockInfo(key=key, acquired_at=datetime.now(UTC), holder_id=self._holder_id)
        finally:
            self._held.discard(key)
            await self._unlock(session, key, lock_id)

    async def _lock(self, session: AsyncSession, lock_id: int, timeout: float | None) -> bool:
        params = {"lock_id": lock_id}
        if timeout is None:
            await session.execute(_LOCK, params)
            return True

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not (await session.execute(_TRY_LOCK, params)).scalar():
            if loop.time() >= deadline:
                return False
            await asyncio.sleep(self._poll_interval)
        return True

    async def _unlock(self, session: AsyncSession, key: str, lock_id: int) -> None:
        try:
            await session.execute(_UNLOCK, {"lock_id": lock_id})
            logger.debug("Released advisory lock %s", key, extra={"lock_key": key})
        except SQLAlchemyError as e:
            # Closing the session still drops the lock
            logger.warning(
                "Could not release advisory lock %s: %s", key, e, extra={"lock_key": key}
            )
        finally:
            await session.close()

    def is_held(self, key: str) -> bool:
        """Whether this manager currently holds ``key``."""
        return key in self._held


__all__ = ["PostgreSQLLockManager", "advisory_lock_id"]
