"""Tests for the clock ticker thread."""

from __future__ import annotations

import threading
import time

from twofa.events import TickEvent
from twofa.ticker import ClockTicker


class Collector:
    def __init__(self, want: int) -> None:
        self.ticks: list[TickEvent] = []
        self.want = want
        self.done = threading.Event()

    def __call__(self, tick: TickEvent) -> None:
        self.ticks.append(tick)
        if len(self.ticks) >= self.want:
            self.done.set()


def test_first_tick_is_immediate():
    sink = Collector(1)
    ticker = ClockTicker(sink, interval=60, clock=lambda: 1234.0)
    ticker.start()
    try:
        assert sink.done.wait(timeout=5)
    finally:
        ticker.stop()
    assert sink.ticks == [TickEvent(1234.0)]


def test_ticks_repeat_until_stopped():
    sink = Collector(3)
    ticker = ClockTicker(sink, interval=0.01)
    ticker.start()
    assert ticker.is_running
    try:
        assert sink.done.wait(timeout=5)
    finally:
        ticker.stop()
    assert not ticker.is_running
    count = len(sink.ticks)
    assert count >= 3
    time.sleep(0.05)
    assert len(sink.ticks) == count


def test_sink_errors_do_not_kill_ticker():
    calls = Collector(2)

    def flaky(tick: TickEvent) -> None:
        calls(tick)
        if len(calls.ticks) == 1:
            raise RuntimeError("boom")

    ticker = ClockTicker(flaky, interval=0.01)
    ticker.start()
    try:
        assert calls.done.wait(timeout=5)
    finally:
        ticker.stop()


def test_start_twice_keeps_one_thread():
    sink = Collector(1)
    ticker = ClockTicker(sink, interval=60)
    ticker.start()
    first = ticker._thread
    ticker.start()
    try:
        assert ticker._thread is first
    finally:
        ticker.stop()
