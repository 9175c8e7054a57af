"""
In-process lock manager.

Serializes operations sharing a key within one process. Locks are kept
per event loop, so one manager can outlive several ``asyncio.run`` calls.
Use PostgreSQLLockManager when several processes may switch the same alias.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from esreadmodels.locks.interface import LockAcquisitionError, LockInfo

logger = logging.getLogger(__name__)


class InMemoryLockManager:
    """
    Lock manager backed by one asyncio.Lock per key and event loop.

    An asyncio.Lock binds to the loop it is first contended in. Callers in
    different loops never contend, so each loop gets its own set of locks.

    Example:
        >>> locks = InMemoryLockManager()
        >>> async with locks.acquire("alias-switch:orders", timeout=5.0):
        ...     await switch()
    """

    def __init__(self, *, holder_id: str | None = None) -> None:
        self._holder_id = holder_id
        self._locks: weakref.WeakKeyDictionary[
            asyncio.AbstractEventLoop, dict[str, asyncio.Lock]
        ] = weakref.WeakKeyDictionary()

    def _lock_for(self, key: str) -> asyncio.Lock:
        loop_locks = self._locks.setdefault(asyncio.get_running_loop(), {})
        lock = loop_locks.get(key)
        if lock is None:
            lock = loop_locks[key] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def acquire(
        self,
        key: str,
        *,
        timeout: float | None = None,
    ) -> AsyncIterator[LockInfo]:
        """
        Acquire the lock for ``key`` as a context manager.

        Raises:
            LockAcquisitionError: If the lock is not acquired within timeout
        """
        lock = self._lock_for(key)

        if timeout is None:
            await lock.acquire()
        else:
            try:
                await asyncio.wait_for(lock.acquire(), timeout=timeout)
            except TimeoutError as e:
                raise LockAcquisitionError(
                    key=key,
                    reason=f"Timeout after {timeout}s",
                    timeout=timeout,
                ) from e

        logger.debug("Acquired lock: key=%s", key)
        try:
            yield LockInfo(
                key=key,
                acquired_at=datetime.now(UTC),
                holder_id=self._holder_id,
            )
        finally:
            lock.release()
            logger.debug("Released lock: key=%s", key)

    def is_held(self, key: str) -> bool:
        """Whether ``key`` is held in any event loop."""
        return any(
            loop_locks[key].locked()
            for loop_locks in list(self._locks.values())
            if key in loop_locks
        )


# Shared by repositories that are not given a lock manager, so switches of
# the same alias from different repository instances in one process queue up.
default_lock_manager = InMemoryLockManager()
