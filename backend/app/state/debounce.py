"""Trailing-edge debounce on top of asyncio tasks."""

import asyncio
from typing import Awaitable, Callable, Generic, Optional, Set, TypeVar

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Run ``callback`` once input has been quiet for ``delay`` seconds.

    Every ``trigger`` restarts the timer, so only the last value inside any
    quiet window reaches the callback. Once the timer fires, the callback
    runs to completion: later triggers never cancel it.
    """

    def __init__(self, delay: float, callback: Callable[[T], Awaitable[None]]):
        self.delay = delay
        self.callback = callback
        self._pending: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        """True while a timer is waiting to fire."""
        return self._pending is not None and not self._pending.done()

    def trigger(self, value: T) -> None:
        self.cancel()
        task = asyncio.create_task(self._fire_after_delay(value))
        self._pending = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def cancel(self) -> None:
        """Drop the waiting timer, if any. A callback already running is left alone."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def join(self) -> None:
        """Wait for the waiting timer and every fired callback to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _fire_after_delay(self, value: T) -> None:
        await asyncio.sleep(self.delay)
        # Fired: from here on a new trigger must not cancel this task
        if self._pending is asyncio.current_task():
            self._pending = None
        await self.callback(value)
