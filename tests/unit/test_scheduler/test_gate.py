"""
Unit tests for the bounded concurrency gate.
"""

import asyncio

import pytest

from benchsched.core.exceptions import SchedulerStateError
from benchsched.scheduler.gate import BoundedGate


class TestBoundedGate:
    """Test cases for BoundedGate."""

    @pytest.mark.parametrize("bad_value", [0, -1, True, "2", 1.5])
    def test_invalid_max_workers(self, bad_value):
        """Only positive integers are accepted."""
        with pytest.raises(SchedulerStateError):
            BoundedGate(bad_value)

    def test_try_acquire_until_exhausted(self):
        """Non-blocking acquisition stops at max_workers."""
        gate = BoundedGate(2)

        assert gate.try_acquire() is True
        assert gate.try_acquire() is True
        assert gate.try_acquire() is False
        assert gate.available_permits() == 0
        assert gate.used_permits() == 2

        gate.release()
        assert gate.available_permits() == 1
        assert gate.try_acquire() is True

    def test_over_release(self):
        """Releasing a permit that was never taken is an error."""
        gate = BoundedGate(1)
        with pytest.raises(SchedulerStateError):
            gate.release()

    @pytest.mark.asyncio
    async def test_acquire_fast_path(self):
        """acquire returns immediately while permits remain."""
        gate = BoundedGate(3)

        await gate.acquire()
        await gate.acquire()

        assert gate.used_permits() == 2
        assert gate.waiting() == 0

    @pytest.mark.asyncio
    async def test_waiters_wake_in_fifo_order(self):
        """Released permits go to the longest waiter first."""
        gate = BoundedGate(1)
        await gate.acquire()
        order = []

        async def waiter(i):
            await gate.acquire()
            order.append(i)
            gate.release()

        tasks = [asyncio.create_task(waiter(i)) for i in range(4)]
        await asyncio.sleep(0)
        assert gate.waiting() == 4

        gate.release()
        await asyncio.gather(*tasks)

        assert order == [0, 1, 2, 3]
        assert gate.available_permits() == 1

    @pytest.mark.asyncio
    async def test_cancelled_waiter_is_removed(self):
        """A cancelled waiter neither holds nor leaks a permit."""
        gate = BoundedGate(1)
        await gate.acquire()

        task = asyncio.create_task(gate.acquire())
        await asyncio.sleep(0)
        assert gate.waiting() == 1

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert gate.waiting() == 0
        gate.release()
        assert gate.available_permits() == 1

    @pytest.mark.asyncio
    async def test_permit_handed_over_is_returned_on_cancel(self):
        """Cancelling a waiter after its permit was granted gives it back."""
        gate = BoundedGate(1)
        await gate.acquire()

        task = asyncio.create_task(gate.acquire())
        await asyncio.sleep(0)

        gate.release()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert gate.available_permits() == 1

    @pytest.mark.asyncio
    async def test_context_manager(self):
        """async with holds a permit for the block only."""
        gate = BoundedGate(1)

        async with gate:
            assert gate.available_permits() == 0

        assert gate.available_permits() == 1
