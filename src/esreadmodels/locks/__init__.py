"""
Lock utilities for esreadmodels.

Alias switches must not run concurrently for the same alias. Lock
managers hand out exclusive locks by key:

- InMemoryLockManager: one asyncio.Lock per key, for a single process
- PostgreSQLLockManager: PostgreSQL advisory locks, across processes
  (requires the ``postgresql`` extra)

Example:
    >>> from esreadmodels.locks import InMemoryLockManager, alias_lock_key
    >>>
    >>> locks = InMemoryLockManager()
    >>> async with locks.acquire(alias_lock_key("orders"), timeout=5.0):
    ...     await switch()
"""

from esreadmodels.locks.interface import (
    LockAcquisitionError,
    LockInfo,
    LockManager,
    alias_lock_key,
)
from esreadmodels.locks.memory import InMemoryLockManager, default_lock_manager

__all__ = [
    "InMemoryLockManager",
    "LockAcquisitionError",
    "LockInfo",
    "LockManager",
    "alias_lock_key",
    "default_lock_manager",
]
