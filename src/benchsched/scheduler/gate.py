"""
Bounded Concurrency Gate

Counting semaphore that limits how many suites may run at once.
Waiters are woken strictly in FIFO order.
"""

import asyncio
from collections import deque
from typing import Deque

from ..core.exceptions import SchedulerStateError


class BoundedGate:
    """FIFO counting semaphore with introspection."""

    def __init__(self, max_workers: int):
        """
        Initialize the gate.

        Args:
            max_workers: Number of permits (must be >= 1)
        """
        if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
            raise SchedulerStateError(
                "max_workers must be a positive integer", {"max_workers": max_workers}
            )
        self.max_workers = max_workers
        self._permits = max_workers
        self._waiters: Deque[asyncio.Future] = deque()

    async def acquire(self) -> None:
        """Take a permit, suspending until one is free."""
        if self._permits > 0 and not self._waiters:
            self._permits -= 1
            return

        future = asyncio.get_running_loop().create_future()
        self._waiters.append(future)
        try:
            await future
        except asyncio.CancelledError:
            if future.done() and not future.cancelled():
                # Permit was handed over just before cancellation
                self.release()
            elif future in self._waiters:
                self._waiters.remove(future)
            raise

    def try_acquire(self) -> bool:
        """Take a permit if one is free right now."""
        if self._permits > 0 and not self._waiters:
            self._permits -= 1
            return True
        return False

    def release(self) -> None:
        """Return a permit, handing it directly to the oldest waiter."""
        while self._waiters:
            future = self._waiters.popleft()
            if not future.done():
                # permit transfers without touching the counter
                future.set_result(None)
                return

        if self._permits >= self.max_workers:
            raise SchedulerStateError("release() called more times than acquire()")
        self._permits += 1

    def available_permits(self) -> int:
        return self._permits

    def used_permits(self) -> int:
        return self.max_workers - self._permits

    def waiting(self) -> int:
        return sum(1 for f in self._waiters if not f.done())

    async def __aenter__(self):
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.release()
