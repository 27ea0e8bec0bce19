"""Global concurrency ceiling shared by every fetch task in a run."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from linkcheck.errors import LimiterClosed


class ConcurrencyLimiter:
    """Counting permit pool backed by :class:`asyncio.Semaphore`.

    A permit must be held for the whole network exchange of one fetch and
    is returned on every exit path of :meth:`permit`.  Waiters are woken in
    whatever order the event loop chooses.

    ``in_use`` and ``peak`` are only touched from the event loop thread.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._semaphore = asyncio.Semaphore(capacity)
        self._in_use = 0
        self._peak = 0
        self._closed = False

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def in_use(self) -> int:
        """Number of permits currently held."""
        return self._in_use

    @property
    def available(self) -> int:
        return self._capacity - self._in_use

    @property
    def peak(self) -> int:
        """Highest number of permits ever held at once."""
        return self._peak

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Tear the limiter down; later acquisitions raise :class:`LimiterClosed`.

        Permits already held are unaffected and still released normally.
        Tasks blocked waiting for a permit fail as soon as they are woken.
        """
        self._closed = True

    @asynccontextmanager
    async def permit(self) -> AsyncIterator[None]:
        """Hold one permit for the duration of the ``async with`` block.

        Raises:
            LimiterClosed: If the limiter was closed before or while waiting.
        """
        if self._closed:
            raise LimiterClosed("concurrency limiter is closed")
        await self._semaphore.acquire()
        if self._closed:
            # Hand the slot on so the next waiter can observe the closure too.
            self._semaphore.release()
            raise LimiterClosed("concurrency limiter was closed while waiting")

        self._in_use += 1
        self._peak = max(self._peak, self._in_use)
        try:
            yield
        finally:
            self._in_use -= 1
            self._semaphore.release()
