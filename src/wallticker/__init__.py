"""wallticker - a ticker that ticks on wall-clock boundaries.

Manifesto:
    An interval timer counts elapsed time; ask it for "every minute" and
    after a clock step or a day of drift it fires at 10:03:17. Jobs that
    must run on the minute need a ticker that watches the wall clock
    itself. wallticker samples the clock at a fine accuracy and fires when
    a sample lands on (or one accuracy unit past) a period boundary.

┌──────────────────────────────────────────────────────────────────────────────┐
│  WALLTICKER                                                                   │
│                                                                               │
│   ┌──────────────┐  samples   ┌──────────────────┐  ticks   ┌────────────┐  │
│   │  RawSource   │ ─────────► │ BoundaryDetector │ ───────► │ TickStream │  │
│   │ Timer/Script │            │  (in Ticker)     │ 1 slot   │  consumer  │  │
│   └──────────────┘            └──────────────────┘          └────────────┘  │
│                                                                               │
│  Quick Start:                                                                 │
│   from wallticker import Ticker                                               │
│                                                                               │
│   with Ticker(period=60, accuracy=1) as ticker:                               │
│       for tick in ticker:                                                     │
│           run_minutely_job(tick)                                              │
└──────────────────────────────────────────────────────────────────────────────┘

Guardrails:
    ❌ Reading ``ticks`` after ``stop()`` (blocks forever)
    ✅ ``stop_close()`` when the consumer iterates until the stream ends
    ❌ Sharing one ``ScriptedSource`` across tickers
    ✅ ``ScriptedSource.factory(times)`` per ticker

Tags:
    wallticker, ticker, wall-clock, scheduling, drift, clock-adjustment
"""

from __future__ import annotations

from .detector import BoundaryDetector
from .errors import (
    ConfigError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    StreamClosedError,
    TickerError,
)
from .health import check_tick_spacing
from .logging import configure_logging, get_logger
from .settings import TickerSettings, get_settings
from .sources import RawSource, ScriptedSource, SourceFactory, TimerSource
from .stream import TickStream
from .ticker import Ticker, TickerHealth, TickerState, new_ticker
from .timestamps import as_timedelta, truncate, utc_now

__version__ = "0.1.0"

__all__ = [
    # Ticker
    "Ticker",
    "TickerState",
    "TickerHealth",
    "new_ticker",
    # Algorithm
    "BoundaryDetector",
    "TickStream",
    # Sources
    "RawSource",
    "SourceFactory",
    "TimerSource",
    "ScriptedSource",
    # Settings
    "TickerSettings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_logger",
    # Errors
    "TickerError",
    "ConfigError",
    "InvalidConfigError",
    "StreamClosedError",
    "ErrorCategory",
    "ErrorContext",
    # Health
    "check_tick_spacing",
    # Time
    "truncate",
    "as_timedelta",
    "utc_now",
]
