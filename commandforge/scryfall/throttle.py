"""
Request throttle.

Serializes every outbound catalog request so that no two start closer
together than a fixed minimum interval, no matter how many tasks are
issuing lookups at once.

INVARIANTS:
- Admission is strict FIFO in the order acquire() was called
- The interval is measured from the START of the previous granted request
- Only the lock holder computes the remaining wait, so two callers can never
  both observe a stale "last request" time and fire together
"""

import asyncio
import time
from collections.abc import Callable


class RequestThrottle:
    """Single FIFO admission queue with a minimum spacing between grants."""

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            min_interval: Minimum seconds between two granted requests
            clock: Monotonic clock, injectable for tests
        """
        self.min_interval = min_interval
        self._clock = clock
        # asyncio.Lock hands ownership to waiters in arrival order
        self._lock = asyncio.Lock()
        self._last_start: float | None = None

    @property
    def last_request_start(self) -> float | None:
        """Clock reading at which the most recent request was admitted."""
        return self._last_start

    async def acquire(self) -> None:
        """Suspend until it is safe to issue one request. Never times out."""
        async with self._lock:
            if self._last_start is not None:
                # Loop: the event loop may wake a sleeper slightly early
                while (remaining := self._last_start + self.min_interval - self._clock()) > 0:
                    await asyncio.sleep(remaining)
            self._last_start = self._clock()
