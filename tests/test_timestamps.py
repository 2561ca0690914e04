"""Tests for wall-clock truncation and duration helpers."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from wallticker.timestamps import EPOCH, as_timedelta, to_iso8601, truncate, utc_now


class TestTruncate:
    """Test truncate()."""

    def test_rounds_down_to_minute(self):
        dt = datetime(2024, 1, 15, 10, 3, 42, 123456, tzinfo=UTC)
        assert truncate(dt, timedelta(minutes=1)) == datetime(2024, 1, 15, 10, 3, tzinfo=UTC)

    def test_boundary_is_fixed_point(self):
        dt = datetime(2024, 1, 15, 10, 3, tzinfo=UTC)
        assert truncate(dt, timedelta(minutes=1)) == dt

    def test_multiples_counted_from_epoch(self):
        dt = EPOCH + timedelta(seconds=7 * 45 + 12)
        assert truncate(dt, timedelta(seconds=45)) == EPOCH + timedelta(seconds=7 * 45)

    def test_sub_second_accuracy(self):
        dt = datetime(2024, 1, 15, 10, 0, 0, 987654, tzinfo=UTC)
        assert truncate(dt, timedelta(milliseconds=100)) == datetime(
            2024, 1, 15, 10, 0, 0, 900000, tzinfo=UTC
        )

    def test_other_timezone_truncates_same_instant(self):
        plus_one = timezone(timedelta(hours=1))
        dt = datetime(2024, 1, 15, 11, 3, 42, tzinfo=plus_one)
        result = truncate(dt, timedelta(minutes=1))
        assert result == datetime(2024, 1, 15, 10, 3, tzinfo=UTC)
        assert result.tzinfo is UTC

    def test_naive_datetime(self):
        dt = datetime(2024, 1, 15, 10, 3, 42)
        assert truncate(dt, timedelta(minutes=1)) == datetime(2024, 1, 15, 10, 3)

    def test_non_positive_duration_is_noop(self):
        dt = datetime(2024, 1, 15, 10, 3, 42, tzinfo=UTC)
        assert truncate(dt, timedelta(0)) == dt


class TestAsTimedelta:
    """Test as_timedelta()."""

    def test_timedelta_passthrough(self):
        d = timedelta(minutes=5)
        assert as_timedelta(d) is d

    def test_seconds(self):
        assert as_timedelta(60) == timedelta(minutes=1)
        assert as_timedelta(0.5) == timedelta(milliseconds=500)

    @pytest.mark.parametrize("value", ["60", None, True])
    def test_rejects_non_durations(self, value):
        with pytest.raises(TypeError):
            as_timedelta(value)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_rejects_non_finite(self, value):
        with pytest.raises(ValueError, match="finite"):
            as_timedelta(value)

    def test_out_of_range(self):
        with pytest.raises(OverflowError):
            as_timedelta(1e20)


def test_utc_now_is_aware():
    assert utc_now().tzinfo is UTC


def test_to_iso8601():
    assert to_iso8601(None) is None
    assert to_iso8601(EPOCH) == "1970-01-01T00:00:00+00:00"
