"""Raw periodic sources for wallticker.

A source produces wall-clock samples at a fixed interval; the ticker turns
them into boundary ticks.

Backends:
    • TimerSource (default): samples the real clock from a daemon thread
    • ScriptedSource: replays synthetic timestamps for tests
"""

from __future__ import annotations

from .protocol import RawSource, SourceFactory
from .scripted import ScriptedSource
from .timer import TimerSource

__all__ = [
    "RawSource",
    "SourceFactory",
    "TimerSource",
    "ScriptedSource",
]
