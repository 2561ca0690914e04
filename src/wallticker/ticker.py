"""Wall-clock ticker lifecycle.

┌──────────────────────────────────────────────────────────────────────────────┐
│  TICKER LIFECYCLE                                                             │
│                                                                               │
│   Ticker(period, accuracy)                                                    │
│      │  validate 0 < accuracy < period                                        │
│      ▼                                                                        │
│   SYNCHRONIZING ── sync thread: wait until next accuracy boundary            │
│      │                                                                        │
│      │  lock:                                                                 │
│      │    done?  ──── yes ──► abort, no source created                        │
│      │    source = source_factory(accuracy)                                   │
│      │    start detector thread                                               │
│      ▼                                                                        │
│   RUNNING ── detector thread:                                                 │
│      │         sample = source.stream.get()                                   │
│      │         tick = detector.observe(sample)                                │
│      │         ticks.offer(tick)   ◄── drop if consumer is behind             │
│      │                                                                        │
│      │  stop() / stop_close()                                                 │
│      ▼                                                                        │
│   STOPPED (terminal) ── done.set(), source.stop(), [ticks.close()]           │
└──────────────────────────────────────────────────────────────────────────────┘

Unlike an interval timer the ticker fires on wall-clock boundaries: ask for
every minute and it ticks on the minute, early if the clock is stepped
back and at most one accuracy unit late if it is stepped forward.

Example:
    >>> ticker = Ticker(timedelta(minutes=1), timedelta(seconds=1))
    >>> for tick in ticker:
    ...     process(tick)
"""

from __future__ import annotations

import itertools
import queue
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any

from .detector import BoundaryDetector
from .errors import InvalidConfigError
from .logging import get_logger
from .sources import RawSource, SourceFactory, TimerSource
from .stream import TickStream
from .timestamps import Duration, as_timedelta, to_iso8601, truncate, utc_now

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .settings import TickerSettings

logger = get_logger(__name__)

# Upper bound on how long the detector waits for a sample before
# rechecking the done signal.
_MAX_POLL = 0.05

_ticker_ids = itertools.count(1)


class TickerState(str, Enum):
    """Lifecycle states. STOPPED is terminal."""

    CONSTRUCTING = "CONSTRUCTING"
    SYNCHRONIZING = "SYNCHRONIZING"
    RUNNING = "RUNNING"
    STOPPED = "STOPPED"


@dataclass
class TickerHealth:
    """Structured ticker health response."""

    healthy: bool
    ticker: str
    state: TickerState
    period_seconds: float
    accuracy_seconds: float
    samples: int = 0
    emitted: int = 0
    dropped: int = 0
    last_tick: datetime | None = None
    lateness_ms: float | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "healthy": self.healthy,
            "ticker": self.ticker,
            "state": self.state.value,
            "period_seconds": self.period_seconds,
            "accuracy_seconds": self.accuracy_seconds,
            "samples": self.samples,
            "emitted": self.emitted,
            "dropped": self.dropped,
            "last_tick": to_iso8601(self.last_tick),
            "lateness_ms": self.lateness_ms,
            **self.extra,
        }


def _validate(period: Duration, accuracy: Duration, name: str) -> tuple[timedelta, timedelta]:
    converted = {}
    for key, value in (("period", period), ("accuracy", accuracy)):
        try:
            converted[key] = as_timedelta(value)
        except (TypeError, ValueError, OverflowError) as e:
            raise InvalidConfigError(key, value, str(e), cause=e).with_context(ticker=name)

    d, a = converted["period"], converted["accuracy"]
    if a <= timedelta(0):
        raise InvalidConfigError(
            "accuracy", a, f"accuracy {a} is not greater than zero"
        ).with_context(ticker=name, period=d, accuracy=a)
    if d <= a:
        raise InvalidConfigError(
            "accuracy", a, f"accuracy {a} is not less than period {d}"
        ).with_context(ticker=name, period=d, accuracy=a)
    return d, a


class Ticker:
    """Delivers ticks on ``period`` wall-clock boundaries, within ``accuracy``.

    Ticks are read from :attr:`ticks` (or by iterating the ticker). The
    stream holds one tick; ticks are dropped while the consumer is behind.
    Stop the ticker to release its threads.

    Args:
        period: Tick cadence, as ``timedelta`` or seconds.
        accuracy: Sampling interval and tolerated lateness; must be
            greater than zero and less than ``period``.
        source_factory: Creates the raw sample source once synchronized.
            Defaults to :class:`TimerSource`.
        name: Used in logs and health output.

    Raises:
        InvalidConfigError: ``period``/``accuracy`` are not durations or
            violate ``0 < accuracy < period``.
    """

    def __init__(
        self,
        period: Duration,
        accuracy: Duration,
        *,
        source_factory: SourceFactory = TimerSource,
        name: str | None = None,
    ) -> None:
        self._state = TickerState.CONSTRUCTING
        self._name = name or f"ticker-{next(_ticker_ids)}"
        self._period, self._accuracy = _validate(period, accuracy, self._name)
        self._source_factory = source_factory

        self._lock = threading.Lock()
        self._done = threading.Event()
        self._source: RawSource | None = None
        self._detector = BoundaryDetector(self._period, self._accuracy)
        self._detector_thread: threading.Thread | None = None
        self._dropped = 0
        self._last_tick: datetime | None = None
        self._log = logger.bind(
            ticker=self._name,
            period=self._period.total_seconds(),
            accuracy=self._accuracy.total_seconds(),
        )

        self.ticks = TickStream(maxsize=1)

        now = utc_now()
        delay = (truncate(now, self._accuracy) + self._accuracy - now).total_seconds()

        self._state = TickerState.SYNCHRONIZING
        self._sync_thread = threading.Thread(
            target=self._synchronize, args=(delay,), daemon=True, name="wallticker-sync"
        )
        self._sync_thread.start()
        self._log.info("ticker_started", sync_delay=delay)

    @classmethod
    def from_settings(
        cls,
        settings: TickerSettings,
        *,
        source_factory: SourceFactory = TimerSource,
        name: str | None = None,
    ) -> Ticker:
        """Create a ticker from loaded :class:`TickerSettings`."""
        return cls(
            settings.period,
            settings.accuracy,
            source_factory=source_factory,
            name=name,
        )

    # ── Lifecycle ────────────────────────────────────────────────

    def _synchronize(self, delay: float) -> None:
        self._done.wait(delay)

        with self._lock:
            if self._done.is_set():
                self._log.info("ticker_start_aborted")
                return
            try:
                self._source = self._source_factory(self._accuracy)
            except Exception:
                self._log.exception("ticker_source_failed")
                self._done.set()
                self._state = TickerState.STOPPED
                self.ticks.close()
                return
            self._detector_thread = threading.Thread(
                target=self._run, args=(self._source,), daemon=True, name="wallticker-detector"
            )
            self._detector_thread.start()
            self._state = TickerState.RUNNING

        self._log.info("ticker_synchronized", source=self._source.name)

    def _run(self, source: RawSource) -> None:
        samples = source.stream
        poll = min(self._accuracy.total_seconds(), _MAX_POLL)

        while not self._done.is_set():
            try:
                sample = samples.get(timeout=poll)
            except queue.Empty:
                continue

            tick = self._detector.observe(sample)
            if tick is None:
                continue

            with self._lock:
                if self._done.is_set():
                    return
                self._last_tick = tick
                delivered = self.ticks.offer(tick)

            if delivered:
                self._log.debug("tick_emitted", tick=tick.isoformat())
            else:
                self._dropped += 1
                self._log.debug("tick_dropped", tick=tick.isoformat())

    def stop(self) -> None:
        """Turn off the ticker. No more ticks are sent after it returns.

        The stream is left open so a concurrent read cannot succeed with a
        value that is not a tick; stop reading after calling this, or use
        :meth:`stop_close`.
        """
        with self._lock:
            if self._done.is_set():
                self._log.warning("ticker_already_stopped")
                return
            self._done.set()
            if self._source is not None:
                self._source.stop()
            self._state = TickerState.STOPPED

        self._log.info(
            "ticker_stopped",
            emitted=self._detector.emitted,
            dropped=self._dropped,
        )

    def stop_close(self) -> None:
        """Stop the ticker and close :attr:`ticks`.

        A consumer iterating over the stream receives any pending tick and
        then its loop ends.
        """
        self.stop()
        self.ticks.close()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the ticker's threads to exit after a stop."""
        self._sync_thread.join(timeout)
        if self._detector_thread is not None:
            self._detector_thread.join(timeout)

    def __enter__(self) -> Ticker:
        return self

    def __exit__(self, *args) -> None:
        self.stop_close()

    def __iter__(self) -> Iterator[datetime]:
        return iter(self.ticks)

    def __repr__(self) -> str:
        return (
            f"Ticker(name={self._name!r}, period={self._period}, "
            f"accuracy={self._accuracy}, state={self._state.value})"
        )

    # ── Introspection ────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    @property
    def period(self) -> timedelta:
        return self._period

    @property
    def accuracy(self) -> timedelta:
        return self._accuracy

    @property
    def state(self) -> TickerState:
        return self._state

    @property
    def is_running(self) -> bool:
        """Check if the detector loop is currently running."""
        return (
            self._state == TickerState.RUNNING
            and self._detector_thread is not None
            and self._detector_thread.is_alive()
        )

    @property
    def last_tick(self) -> datetime | None:
        """The most recent tick produced, delivered or not."""
        return self._last_tick

    def get_health(self) -> TickerHealth:
        """Return structured health status."""
        last = self._last_tick
        lateness = None
        if last is not None:
            lateness = (last - truncate(last, self._period)).total_seconds() * 1000
        return TickerHealth(
            healthy=self.is_running,
            ticker=self._name,
            state=self._state,
            period_seconds=self._period.total_seconds(),
            accuracy_seconds=self._accuracy.total_seconds(),
            samples=self._detector.samples,
            emitted=self._detector.emitted,
            dropped=self._dropped,
            last_tick=last,
            lateness_ms=lateness,
            extra={"source": self._source.name if self._source is not None else None},
        )

    def health(self) -> dict[str, Any]:
        """Return ticker health status as a dict."""
        return self.get_health().to_dict()


def new_ticker(
    period: Duration,
    accuracy: Duration,
    *,
    source_factory: SourceFactory = TimerSource,
    name: str | None = None,
) -> Ticker:
    """Factory function to create and start a :class:`Ticker`.

    Example:
        >>> ticker = new_ticker(60, 1)
        >>> first = ticker.ticks.get()
        >>> ticker.stop()
    """
    return Ticker(period, accuracy, source_factory=source_factory, name=name)
