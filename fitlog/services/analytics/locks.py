"""
Per-user locks serializing summary read-modify-write cycles.

Folds for different users never contend; at most one fold or rebuild
per user is in flight within a process. Writers in other processes are
caught by the version column on UserAnalytics.
"""
import asyncio
from contextlib import asynccontextmanager
from threading import Lock
from typing import AsyncIterator, Dict

from fitlog.core.exceptions import AggregationError
from fitlog.core.logging import get_logger

logger = get_logger(__name__)


class UserLockRegistry:
    """
    Lazily created asyncio.Lock per user ID.

    An entry lives only while some caller holds or waits on it, so the
    registry stays as small as the number of users with folds in flight.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}
        self._guard = Lock()

    def _checkout(self, user_id: str) -> asyncio.Lock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = asyncio.Lock()
                self._locks[user_id] = lock
            self._users[user_id] = self._users.get(user_id, 0) + 1
            return lock

    def _checkin(self, user_id: str) -> None:
        with self._guard:
            remaining = self._users[user_id] - 1
            if remaining:
                self._users[user_id] = remaining
            else:
                del self._users[user_id]
                del self._locks[user_id]

    @asynccontextmanager
    async def hold(self, user_id: str, timeout: float) -> AsyncIterator[None]:
        """
        Hold the user's lock for the duration of the block.

        Raises:
            AggregationError: If the lock is not acquired within timeout
        """
        lock = self._checkout(user_id)
        try:
            try:
                await asyncio.wait_for(lock.acquire(), timeout=timeout)
            except asyncio.TimeoutError:
                logger.error("Timed out waiting for analytics lock", user_id=user_id, timeout=timeout)
                raise AggregationError(user_id, "Timed out waiting for analytics lock")

            try:
                yield
            finally:
                lock.release()
        finally:
            self._checkin(user_id)

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._locks

    def __len__(self) -> int:
        return len(self._locks)


user_locks = UserLockRegistry()
