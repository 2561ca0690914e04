"""Scripted raw source for deterministic tests.

Replays a fixed sequence of synthetic timestamps at a short real-time
cadence. Feeding it four minutes of one-second samples at 1ms apart lets a
test exercise drift, clock adjustments and lost samples in a quarter of a
second of real time.

Unlike ``TimerSource`` it never drops a sample: when the stream is full it
waits for the reader, so the replayed sequence reaches the detector intact.
"""

from __future__ import annotations

import queue
import threading
from collections.abc import Iterable
from datetime import datetime, timedelta

from .protocol import SourceFactory


class ScriptedSource:
    """Replays ``times`` on ``stream``, one every ``interval`` of real time."""

    name = "scripted"

    def __init__(
        self,
        times: Iterable[datetime],
        interval: timedelta = timedelta(milliseconds=1),
        maxsize: int = 4,
    ) -> None:
        self.stream: queue.Queue[datetime] = queue.Queue(maxsize=maxsize)
        self._times = list(times)
        self._interval = interval.total_seconds()
        self._stop_event = threading.Event()
        self._replayed = 0
        self._thread = threading.Thread(target=self._run, daemon=True, name="wallticker-scripted")
        self._thread.start()

    @classmethod
    def factory(
        cls,
        times: Iterable[datetime],
        interval: timedelta = timedelta(milliseconds=1),
    ) -> SourceFactory:
        """Return a source factory that replays ``times``.

        The requested accuracy is ignored; the replay cadence is ``interval``.

        Example:
            >>> ticker = Ticker(timedelta(minutes=1), timedelta(seconds=1),
            ...                 source_factory=ScriptedSource.factory(times))
        """
        times = list(times)

        def _create(accuracy: timedelta) -> ScriptedSource:
            return cls(times, interval=interval)

        return _create

    def _run(self) -> None:
        for tm in self._times:
            if self._stop_event.wait(self._interval):
                return
            while True:
                try:
                    self.stream.put(tm, timeout=self._interval)
                    break
                except queue.Full:
                    if self._stop_event.is_set():
                        return
            self._replayed += 1

    def stop(self) -> None:
        self._stop_event.set()

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    @property
    def replayed(self) -> int:
        """Number of scripted samples delivered so far."""
        return self._replayed

    @property
    def exhausted(self) -> bool:
        """True once every scripted sample has been delivered."""
        return self._replayed == len(self._times)
