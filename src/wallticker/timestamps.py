"""
Wall-clock timestamp and duration utilities (stdlib-only).

Every comparison the ticker makes is a comparison of truncated wall-clock
instants. Truncation is done in exact integer arithmetic on ``timedelta``
so two samples that fall into the same accuracy slot compare equal, with
no floating point involved.

Features:
    - **utc_now():** Timezone-aware UTC datetime
    - **truncate():** Round an instant down to a multiple of a duration
      since the Unix epoch
    - **as_timedelta():** Accept ``timedelta`` or seconds as a number
    - **to_iso8601():** Safe serialization for health output

Tags:
    timestamps, utc, datetime, truncation, wallticker, stdlib-only

Doc-Types:
    - API Reference
    - Utility Documentation

STDLIB ONLY - NO PYDANTIC.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_NAIVE_EPOCH = datetime(1970, 1, 1)

Duration = timedelta | int | float


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def as_timedelta(value: Duration) -> timedelta:
    """Normalize a duration given as ``timedelta`` or seconds.

    Raises:
        TypeError: If ``value`` is neither a ``timedelta`` nor a real number.
        ValueError: If ``value`` is NaN or infinite.
        OverflowError: If ``value`` is beyond the range of ``timedelta``.
    """
    if isinstance(value, timedelta):
        return value
    # bool is an int subclass but never a meaningful duration
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected timedelta or seconds, got {type(value).__name__}")
    if not math.isfinite(value):
        raise ValueError(f"expected a finite number of seconds, got {value}")
    return timedelta(seconds=value)


def truncate(dt: datetime, d: timedelta) -> datetime:
    """Round ``dt`` down to a multiple of ``d`` since the Unix epoch.

    Aware datetimes are truncated against the UTC epoch and returned in
    UTC; naive datetimes against a naive epoch. A non-positive ``d``
    returns ``dt`` unchanged.

    Example:
        >>> truncate(datetime(2024, 1, 15, 10, 0, 42, tzinfo=UTC), timedelta(minutes=1))
        datetime.datetime(2024, 1, 15, 10, 0, tzinfo=datetime.timezone.utc)
    """
    if d <= timedelta(0):
        return dt
    epoch = _NAIVE_EPOCH if dt.tzinfo is None else EPOCH
    return epoch + ((dt - epoch) // d) * d


def to_iso8601(dt: datetime | None) -> str | None:
    """Convert datetime to ISO 8601 string."""
    if dt is None:
        return None
    return dt.isoformat()


__all__ = [
    "EPOCH",
    "Duration",
    "utc_now",
    "as_timedelta",
    "truncate",
    "to_iso8601",
]
