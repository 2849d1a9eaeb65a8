"""
Async Utility Functions

Async helpers used by the scheduler for timeouts, named tasks and
running synchronous collaborators without blocking the event loop.
"""

import asyncio
import contextvars
import inspect
from typing import Any, Awaitable, Callable, List, Optional

from ..core.exceptions import SuiteTimeoutError
from .logging import get_logger

logger = get_logger(__name__)


async def call_maybe_async(func: Callable[[], Any]) -> Any:
    """
    Call a zero-argument function that may be sync or async.

    Coroutine functions are awaited on the running loop. Plain functions
    are executed in a worker thread; if they hand back an awaitable it is
    awaited on the loop afterwards.
    """
    if inspect.iscoroutinefunction(func):
        return await func()

    result = await asyncio.to_thread(func)
    if inspect.isawaitable(result):
        result = await result
    return result


async def with_timeout(awaitable: Awaitable[Any], timeout: Optional[float],
                       suite_name: str) -> Any:
    """
    Await with an optional timeout.

    Args:
        awaitable: Coroutine or future to await
        timeout: Timeout in seconds (None or <= 0 disables it)
        suite_name: Suite the work belongs to, used in the raised error

    Returns:
        Result of the awaitable

    Raises:
        SuiteTimeoutError: If the timeout elapses first
    """
    if timeout is None or timeout <= 0:
        return await awaitable

    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error(f"Timeout after {timeout}s in suite {suite_name}")
        raise SuiteTimeoutError(suite_name, timeout, cause=e) from e


async def call_with_deadline(func: Callable[[], Any], timeout: Optional[float],
                             suite_name: str) -> Any:
    """
    Call ``func`` like call_maybe_async, bounded by an optional timeout.

    Coroutine work is cancelled at the deadline. A worker thread cannot be
    interrupted, so a plain function that overruns is waited for and
    SuiteTimeoutError is raised only once its thread has finished; callers
    keep the work's slot until then.

    Raises:
        SuiteTimeoutError: If the timeout elapses before ``func`` finishes
    """
    if timeout is None or timeout <= 0:
        return await call_maybe_async(func)

    if inspect.iscoroutinefunction(func):
        return await with_timeout(func(), timeout, suite_name)

    loop = asyncio.get_running_loop()
    started = loop.time()
    context = contextvars.copy_context()
    thread_future = loop.run_in_executor(None, context.run, func)

    done, _ = await asyncio.wait({thread_future}, timeout=timeout)
    if not done:
        logger.error(f"Timeout after {timeout}s in suite {suite_name}; waiting for its worker thread")
        await asyncio.wait({thread_future})
        if not thread_future.cancelled() and thread_future.exception() is not None:
            logger.debug(f"Suite {suite_name} raised after its timeout: {thread_future.exception()!r}")
        raise SuiteTimeoutError(suite_name, timeout)

    result = thread_future.result()
    if inspect.isawaitable(result):
        remaining = max(timeout - (loop.time() - started), 0.001)
        try:
            result = await asyncio.wait_for(result, timeout=remaining)
        except asyncio.TimeoutError as e:
            logger.error(f"Timeout after {timeout}s in suite {suite_name}")
            raise SuiteTimeoutError(suite_name, timeout, cause=e) from e
    return result


def create_task_with_name(coro: Awaitable[Any], name: str) -> asyncio.Task:
    """
    Create a named task for better debugging.

    Args:
        coro: Coroutine to execute
        name: Task name

    Returns:
        Named asyncio Task
    """
    return asyncio.create_task(coro, name=name)


async def cancel_tasks(tasks: List[asyncio.Task]) -> None:
    """
    Cancel a list of tasks gracefully.

    Args:
        tasks: List of tasks to cancel
    """
    if not tasks:
        return

    for task in tasks:
        task.cancel()

    # Wait for them to finish cancellation
    await asyncio.gather(*tasks, return_exceptions=True)

    logger.debug(f"Cancelled {len(tasks)} tasks")
