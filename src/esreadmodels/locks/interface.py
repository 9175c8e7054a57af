"""
Lock manager protocol and shared lock types.

Switching an alias to a new index reads the indices currently behind the
alias and then rewrites the alias in a separate request. Two switches
interleaving on the same alias would each compute a stale set of old
indices, so callers hold a lock keyed by the alias for the whole switch.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable

from esreadmodels.exceptions import EsReadModelsError


@dataclass(frozen=True)
class LockInfo:
    """What ``acquire`` yields: the key, when it was taken and by whom."""

    key: str
    acquired_at: datetime
    holder_id: str | None = None


class LockAcquisitionError(EsReadModelsError):
    """
    The lock for ``key`` could not be taken.

    ``timeout`` is set when the wait ran out, None when the backend failed.
    """

    def __init__(self, key: str, reason: str, timeout: float | None = None) -> None:
        self.key = key
        self.reason = reason
        self.timeout = timeout
        super().__init__(f"Could not acquire lock {key!r}: {reason}")


@runtime_checkable
class LockManager(Protocol):
    """
    Protocol for managers handing out exclusive locks by key.

    Example:
        >>> async with lock_manager.acquire(alias_lock_key("orders")):
        ...     await repo.switch_to_new_index(suffix)
    """

    def acquire(
        self,
        key: str,
        *,
        timeout: float | None = None,
    ) -> AbstractAsyncContextManager[LockInfo]:
        """
        Acquire a lock for the duration of an ``async with`` block.

        ``timeout`` is in seconds; None waits as long as it takes.

        Raises:
            LockAcquisitionError: If the lock cannot be acquired in time
        """
        ...


def alias_lock_key(alias: str) -> str:
    """
    Create the lock key guarding alias switches.

    Example:
        >>> alias_lock_key("order_summaries")
        'alias-switch:order_summaries'
    """
    return f"alias-switch:{alias}"
