"""Single-slot tick stream shared between a ticker and its consumer.

┌──────────────────────────────────────────────────────────────────────────────┐
│  TICK STREAM                                                                  │
│                                                                               │
│   detector thread                                  consumer                   │
│   ───────────────                                  ────────                   │
│   offer(tick) ──► ┌────────────┐ ──► get() / for tick in stream              │
│     never blocks  │  1 slot    │       blocks until a tick or close          │
│     drops if full └────────────┘                                             │
│                                                                               │
│   close() ──► pending tick still delivered, then iteration ends              │
└──────────────────────────────────────────────────────────────────────────────┘

The ticker is the only writer and the caller the only reader. A consumer
that falls behind sees at most one stale tick, never a backlog.
"""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Iterator
from datetime import datetime

from .errors import StreamClosedError


class TickStream:
    """Bounded, closable channel of tick timestamps.

    Example:
        >>> stream = TickStream()
        >>> stream.offer(tick)
        True
        >>> stream.get(timeout=1.0)
        tick
    """

    def __init__(self, maxsize: int = 1) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self._maxsize = maxsize
        self._items: deque[datetime] = deque()
        self._closed = False
        self._cond = threading.Condition(threading.Lock())

    def offer(self, tick: datetime) -> bool:
        """Deliver ``tick`` without blocking.

        Returns False if the slot is occupied or the stream is closed; the
        tick is dropped in that case.
        """
        with self._cond:
            if self._closed or len(self._items) >= self._maxsize:
                return False
            self._items.append(tick)
            self._cond.notify()
            return True

    def get(self, timeout: float | None = None) -> datetime:
        """Block until a tick is available and return it.

        Raises:
            StreamClosedError: The stream was closed and has no pending tick.
            TimeoutError: ``timeout`` elapsed with nothing to read.
        """
        with self._cond:
            if not self._cond.wait_for(lambda: self._items or self._closed, timeout):
                raise TimeoutError(f"no tick within {timeout}s")
            if self._items:
                return self._items.popleft()
            raise StreamClosedError()

    def close(self) -> None:
        """Close the stream, waking any blocked reader."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def maxsize(self) -> int:
        return self._maxsize

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def __iter__(self) -> Iterator[datetime]:
        while True:
            try:
                yield self.get()
            except StreamClosedError:
                return


__all__ = ["TickStream"]
