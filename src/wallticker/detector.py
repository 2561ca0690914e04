"""Boundary detection on a stream of wall-clock samples.

┌──────────────────────────────────────────────────────────────────────────────┐
│  BOUNDARY DETECTOR                                                            │
│                                                                               │
│   sample ──► now = truncate(sample, accuracy)                                 │
│                   │                                                           │
│                   ▼                                                           │
│              boundary = truncate(now, period)                                 │
│                   │                                                           │
│                   ▼                                                           │
│     now == boundary ?  ─── yes ──────────────────────────► emit now           │
│                   │ no                                                        │
│                   ▼                                                           │
│     last != boundary and now - accuracy == boundary ? ─ yes ─► emit now      │
│                   │ no                                                        │
│                   ▼                                                           │
│               discard                                                         │
│                                                                               │
│   emit: last = boundary                                                       │
└──────────────────────────────────────────────────────────────────────────────┘

The second branch is the catch-up match: the on-boundary sample never
arrived (jitter, a forward clock step landing between samples) but the
next one is still within one accuracy unit, so the tick goes out one unit
late. ``last`` keeps the exact sample and the one-late sample from both
firing for the same boundary.

A backward clock step needs no special handling. When the clock reaches
a boundary again the next sample truncates onto it and fires, earlier
than monotonic time would have.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from .timestamps import truncate


class BoundaryDetector:
    """Decides, per raw sample, whether a period boundary has been reached."""

    def __init__(self, period: timedelta, accuracy: timedelta) -> None:
        self.period = period
        self.accuracy = accuracy
        self.last: datetime | None = None
        self.samples = 0
        self.emitted = 0
        self.suppressed = 0

    def observe(self, sample: datetime) -> datetime | None:
        """Feed one raw sample.

        Returns the accuracy-truncated sample if it marks a boundary that
        has not been emitted yet, otherwise None.
        """
        self.samples += 1
        now = truncate(sample, self.accuracy)
        boundary = truncate(now, self.period)

        if now != boundary:
            if now - self.accuracy != boundary:
                return None
            if self.last == boundary:
                self.suppressed += 1
                return None

        self.last = boundary
        self.emitted += 1
        return now
