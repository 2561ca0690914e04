"""Tests for TickStream."""

import threading
import time
from datetime import UTC, datetime, timedelta

import pytest

from wallticker import StreamClosedError, TickStream

T0 = datetime(2024, 1, 15, 10, 0, tzinfo=UTC)


class TestTickStream:
    """Test the single-slot, drop-on-full stream."""

    def test_offer_then_get(self):
        stream = TickStream()
        assert stream.offer(T0) is True
        assert len(stream) == 1
        assert stream.get(timeout=1.0) == T0
        assert len(stream) == 0

    def test_drops_when_full(self):
        """A slow consumer sees only the first pending tick."""
        stream = TickStream()
        assert stream.offer(T0) is True
        assert stream.offer(T0 + timedelta(minutes=1)) is False
        assert stream.offer(T0 + timedelta(minutes=2)) is False

        assert stream.get(timeout=1.0) == T0
        with pytest.raises(TimeoutError):
            stream.get(timeout=0.05)

    def test_get_blocks_until_offer(self):
        stream = TickStream()

        def producer():
            time.sleep(0.05)
            stream.offer(T0)

        threading.Thread(target=producer).start()
        assert stream.get(timeout=2.0) == T0

    def test_get_timeout(self):
        with pytest.raises(TimeoutError):
            TickStream().get(timeout=0.01)

    def test_invalid_maxsize(self):
        with pytest.raises(ValueError):
            TickStream(maxsize=0)


class TestTickStreamClose:
    """Test close semantics."""

    def test_pending_tick_delivered_after_close(self):
        stream = TickStream()
        stream.offer(T0)
        stream.close()

        assert stream.closed
        assert stream.get(timeout=1.0) == T0
        with pytest.raises(StreamClosedError):
            stream.get(timeout=1.0)

    def test_offer_after_close_dropped(self):
        stream = TickStream()
        stream.close()
        assert stream.offer(T0) is False

    def test_close_wakes_blocked_reader(self):
        stream = TickStream()
        errors = []

        def reader():
            try:
                stream.get()
            except StreamClosedError as e:
                errors.append(e)

        thread = threading.Thread(target=reader)
        thread.start()
        time.sleep(0.05)
        stream.close()
        thread.join(timeout=2.0)

        assert not thread.is_alive()
        assert len(errors) == 1

    def test_iteration_ends_on_close(self):
        stream = TickStream()
        received = []

        def consume():
            for tick in stream:
                received.append(tick)

        thread = threading.Thread(target=consume)
        thread.start()
        for i in range(3):
            while not stream.offer(T0 + timedelta(minutes=i)):
                time.sleep(0.001)
        stream.close()
        thread.join(timeout=2.0)

        assert not thread.is_alive()
        assert received == [T0 + timedelta(minutes=i) for i in range(3)]
