"""Tick spacing analysis.

Given the ticks a consumer actually received, report whether they landed
where a wall-clock ticker promises: on period boundaries (within one
accuracy unit), strictly increasing, and without skipped boundaries.

┌──────────────────────────────────────────────────────────────────────────────┐
│   received:   10:00:00   10:01:00   10:03:01   10:03:01                      │
│                  │          │          │          │                          │
│   boundary:   10:00      10:01      10:03      10:03                         │
│                             └── gap ───┘          └── duplicate              │
│   lateness:      0s         0s         1s                                    │
└──────────────────────────────────────────────────────────────────────────────┘

Gaps are expected under backpressure and after forward clock steps, so
they are reported rather than treated as failures.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import Any

from .timestamps import truncate


def check_tick_spacing(
    ticks: Sequence[datetime],
    period: timedelta,
    accuracy: timedelta | None = None,
) -> dict[str, Any]:
    """Analyze received ticks against their period boundaries.

    Args:
        ticks: Ticks in the order they were received
        period: Configured ticker period
        accuracy: Maximum tolerated lateness; ticks later than this past
            their boundary count as ``off_boundary``. Defaults to zero.

    Returns:
        Analysis result with gap, duplicate and lateness metrics. ``ok`` is
        True when there are no duplicates, no out-of-order ticks and no
        off-boundary ticks.
    """
    tolerance = accuracy or timedelta(0)
    boundaries = [truncate(t, period) for t in ticks]
    lateness = [(t - b).total_seconds() for t, b in zip(ticks, boundaries)]
    off_boundary = sum(1 for t, b in zip(ticks, boundaries) if t - b > tolerance)

    gaps = 0
    duplicates = 0
    out_of_order = 0
    for prev, cur in zip(boundaries, boundaries[1:]):
        if cur == prev:
            duplicates += 1
        elif cur < prev:
            out_of_order += 1
        else:
            gaps += (cur - prev) // period - 1

    return {
        "ok": duplicates == 0 and out_of_order == 0 and off_boundary == 0,
        "samples": len(ticks),
        "gaps": gaps,
        "duplicates": duplicates,
        "out_of_order": out_of_order,
        "off_boundary": off_boundary,
        "max_lateness_seconds": max(lateness) if lateness else None,
    }


__all__ = ["check_tick_spacing"]
