"""Replay tests: a full Ticker driven by scripted wall-clock samples.

Each scenario replays minutes (or an hour-long clock step) of one-second
samples at 1ms apart, then checks the exact ticks delivered.
"""

import time
from datetime import timedelta

from tests._support.replay import TICK_TIMEOUT, add_ticks, add_times, replay
from wallticker import ScriptedSource, Ticker
from wallticker.health import check_tick_spacing
from wallticker.timestamps import truncate, utc_now


class TestTickerDrift:
    def test_ticks_follow_sampled_clock(self, minute_scenario):
        """Ticks follow the values from the source, so the ticker adapts to drift."""
        d, a, now = minute_scenario

        times = add_times([], now, now + 4 * d, a)
        ticks = add_ticks([], now, now + 3 * d, d, a)

        received = replay(d, a, times, len(ticks))

        assert received == ticks
        assert check_tick_spacing(received, d)["gaps"] == 0
        assert all(b - a_ == d for a_, b in zip(received, received[1:]))
        # Replayed minutes finish long before the real ones would
        assert utc_now() < received[-1]


class TestTickerAdjustment:
    def test_backward_step_fires_early(self, minute_scenario):
        """After the clock is stepped back an hour, ticks resume on its boundaries."""
        d, a, now = minute_scenario
        summer = now - timedelta(hours=1)

        times = add_times([], now, now + d, a)
        times = add_times(times, summer + 2 * d, summer + 5 * d, a)

        ticks = [truncate(now, d) + d]
        ticks = add_ticks(ticks, summer + 2 * d, summer + 4 * d, d, a)

        received = replay(d, a, times, len(ticks))

        assert received == ticks
        assert utc_now() > received[-1]

    def test_forward_step_skips_boundaries(self, minute_scenario):
        """Boundaries jumped over are never emitted retroactively."""
        d, a, now = minute_scenario
        jumped = now + timedelta(minutes=30)

        times = add_times([], now, now + d, a)
        times = add_times(times, jumped, jumped + 2 * d, a)

        ticks = [truncate(now, d) + d]
        ticks = add_ticks(ticks, jumped, jumped + d, d, a)

        received = replay(d, a, times, len(ticks))

        assert received == ticks
        assert check_tick_spacing(received, d)["gaps"] >= 28


class TestTickerLostTick:
    def test_missing_boundary_sample_ticks_one_late(self, minute_scenario):
        """Dropping the sample that lands on a boundary still yields that tick."""
        d, a, now = minute_scenario

        times = add_times([], now, now + 4 * d, a)
        ticks = add_ticks([], now, now + 3 * d, d, a)

        for i, t in enumerate(times):
            if truncate(t, d) == ticks[0]:
                del times[i]
                ticks[0] += a
                break

        received = replay(d, a, times, len(ticks))

        assert received == ticks
        assert received[0] - truncate(received[0], d) == a


class TestTickerBackpressure:
    def test_slow_consumer_sees_one_tick(self, minute_scenario):
        """With nobody reading, at most one tick is buffered; the rest are dropped."""
        d, a, now = minute_scenario
        times = add_times([], now, now + 5 * d, a)
        expected = add_ticks([], now, now + 4 * d, d, a)
        sources = []

        def factory(accuracy):
            source = ScriptedSource(times)
            sources.append(source)
            return source

        ticker = Ticker(d, a, source_factory=factory)
        try:
            deadline = time.monotonic() + TICK_TIMEOUT
            while time.monotonic() < deadline:
                if sources and sources[0].exhausted and sources[0].stream.empty():
                    break
                time.sleep(0.01)
            time.sleep(0.05)

            health = ticker.get_health()
            assert len(ticker.ticks) == 1
            pending = ticker.ticks.get(timeout=0.1)
        finally:
            ticker.stop()

        assert pending in expected
        assert health.emitted == len(expected)
        assert health.dropped == health.emitted - 1
