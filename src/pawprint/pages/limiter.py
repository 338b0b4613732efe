"""Concurrency limiter — caps in-flight page builds.

Large page sets would otherwise open every file and start every worker
thread at once.  Tasks beyond the cap wait on a semaphore until a slot
frees; completion order is unspecified.

Blocking work is handed to ``to_daemon_thread`` rather than the loop's
default executor.  A page that times out keeps its thread, but nothing
waits for that thread: neither ``asyncio.run`` shutting down its executor
nor the interpreter joining worker threads at exit.
"""

from __future__ import annotations

import asyncio
import threading
from typing import TYPE_CHECKING, Any, TypeVar

from pawprint.config import DEFAULT_CONCURRENCY

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

T = TypeVar("T")


class ConcurrencyLimiter:
    """Runs coroutines with at most ``limit`` in flight.

    Args:
        limit: Maximum concurrent tasks (> 0).
        timeout: Seconds each task may run before ``TimeoutError`` is raised
            and its slot released, or *None* for no limit.

    """

    __slots__ = ("_active", "_limit", "_peak", "_semaphore", "_timeout")

    def __init__(self, limit: int = DEFAULT_CONCURRENCY, *, timeout: float | None = None) -> None:
        if limit <= 0:
            msg = f"limit must be > 0, got {limit}"
            raise ValueError(msg)
        self._limit = limit
        self._timeout = timeout
        self._semaphore = asyncio.Semaphore(limit)
        self._active = 0
        self._peak = 0

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def timeout(self) -> float | None:
        return self._timeout

    @property
    def active(self) -> int:
        """Tasks currently holding a slot."""
        return self._active

    @property
    def peak(self) -> int:
        """Highest number of tasks that held a slot at the same time."""
        return self._peak

    async def run(self, fn: Callable[..., Awaitable[T]], *args: Any) -> T:
        """Await ``fn(*args)`` once a slot is free."""
        async with self._semaphore:
            self._active += 1
            self._peak = max(self._peak, self._active)
            try:
                if self._timeout is None:
                    return await fn(*args)
                return await asyncio.wait_for(fn(*args), self._timeout)
            finally:
                self._active -= 1


async def to_daemon_thread(fn: Callable[..., T], *args: Any) -> T:
    """Run blocking ``fn(*args)`` in a fresh daemon thread and await its result.

    Cancelling the await (e.g. on timeout) abandons the thread; its result,
    whenever it arrives, is discarded.

    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[T] = loop.create_future()

    def settle(result: Any, error: BaseException | None) -> None:
        if future.cancelled():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(result)

    def target() -> None:
        try:
            result, error = fn(*args), None
        except BaseException as exc:  # noqa: BLE001
            result, error = None, exc
        try:
            loop.call_soon_threadsafe(settle, result, error)
        except RuntimeError:
            # Loop already closed; the pass gave up on this call
            return

    threading.Thread(target=target, name=f"pawprint-{getattr(fn, "__name__", "worker")}", daemon=True).start()
    return await future
