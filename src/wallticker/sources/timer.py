"""Zero-dependency threading-based raw source.

This is the DEFAULT source for wallticker. It samples the real wall clock
from a daemon thread at a fixed interval, the way a runtime ticker would.

┌──────────────────────────────────────────────────────────────────────────────┐
│  TIMER SOURCE ARCHITECTURE                                                    │
│                                                                               │
│   __init__(interval)                                                          │
│      │                                                                        │
│      ▼                                                                        │
│   ┌─────────────────────────────────────────────────────────┐                │
│   │              Daemon Thread (loop)                       │                │
│   │                                                         │                │
│   │   while not stop_event.wait(until next slot):           │                │
│   │       stream.put_nowait(utc_now())  ◄── drop if full    │                │
│   │       next slot += interval (monotonic)                 │                │
│   │                                                         │                │
│   └─────────────────────────────────────────────────────────┘                │
│                                                                               │
│   stop()                                                                      │
│      │                                                                        │
│      ▼                                                                        │
│   stop_event.set()                                                            │
│                                                                               │
│  Slots are scheduled on the monotonic clock so sampling itself does not      │
│  drift; the samples are wall-clock so the consumer sees adjustments.         │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import math
import queue
import threading
import time
from datetime import datetime, timedelta

from ..logging import get_logger
from ..timestamps import utc_now

logger = get_logger(__name__)


def _next_slot(scheduled: float, now: float, interval: float) -> float:
    """First slot at or after ``now``, stepping from ``scheduled``.

    Overslept slots are skipped instead of bursting to catch up.
    """
    behind = now - scheduled
    if behind > 0:
        scheduled += math.ceil(behind / interval) * interval
    return scheduled


class TimerSource:
    """Wall-clock sampler backed by a daemon thread.

    The stream holds a single sample; when the reader is behind, new
    samples are dropped rather than queued.

    Example:
        >>> source = TimerSource(timedelta(seconds=1))
        >>> sample = source.stream.get()
        >>> source.stop()
    """

    name = "timer"

    def __init__(self, interval: timedelta) -> None:
        if interval <= timedelta(0):
            raise ValueError(f"non-positive interval for TimerSource: {interval}")
        self.stream: queue.Queue[datetime] = queue.Queue(maxsize=1)
        self._interval = interval.total_seconds()
        self._stop_event = threading.Event()
        self._dropped = 0
        self._thread = threading.Thread(target=self._loop, daemon=True, name="wallticker-timer")
        self._thread.start()

    def _loop(self) -> None:
        next_at = time.monotonic() + self._interval
        while not self._stop_event.wait(max(0.0, next_at - time.monotonic())):
            try:
                self.stream.put_nowait(utc_now())
            except queue.Full:
                self._dropped += 1

            next_at = _next_slot(next_at + self._interval, time.monotonic(), self._interval)

        logger.debug("timer_source_stopped", dropped=self._dropped)

    def stop(self) -> None:
        """Stop sampling. Does not wait for the thread to exit."""
        self._stop_event.set()

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive() and not self._stop_event.is_set()

    @property
    def dropped(self) -> int:
        """Number of samples dropped because the reader was behind."""
        return self._dropped
