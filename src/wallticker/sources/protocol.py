"""Raw periodic source protocol.

┌──────────────────────────────────────────────────────────────────────────────┐
│  RAW SOURCE PROTOCOL                                                          │
│                                                                               │
│  Design Philosophy:                                                           │
│  A source controls WHEN wall-clock samples arrive; the ticker's boundary     │
│  detector decides WHAT they mean. Keeping the two apart is what lets tests   │
│  replay an hour of clock adjustments in a fraction of a second.              │
│                                                                               │
│   ┌─────────────────┐     stream      ┌─────────────────────┐                │
│   │  TimerSource    │ ──────────────► │                     │                │
│   │  (production)   │                 │  Ticker detector    │                │
│   └─────────────────┘                 │  loop               │                │
│                                       │                     │                │
│   ┌─────────────────┐     stream      │  truncate, compare, │                │
│   │  ScriptedSource │ ──────────────► │  emit               │                │
│   │  (test replay)  │                 └─────────────────────┘                │
│   └─────────────────┘                                                        │
│                                                                               │
│  The ticker never constructs a source directly: it calls the                 │
│  ``SourceFactory`` it was given with the accuracy interval.                  │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import queue
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Protocol, runtime_checkable


@runtime_checkable
class RawSource(Protocol):
    """Protocol for pluggable raw time sources.

    A source delivers wall-clock timestamps on ``stream`` at roughly a
    fixed interval until ``stop()`` is called. Samples need not be aligned
    to the interval; the consumer truncates them.

    Implementations:
        - TimerSource: real clock sampled by a daemon thread (default)
        - ScriptedSource: replays a fixed list of timestamps (tests)
    """

    name: str
    stream: queue.Queue[datetime]

    def stop(self) -> None:
        """Stop producing samples. Samples already queued may remain."""
        ...


SourceFactory = Callable[[timedelta], RawSource]
