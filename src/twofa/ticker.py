"""Clock ticker: posts a TickEvent on a fixed interval for as long as it runs."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from twofa.events import TickEvent

logger = logging.getLogger(__name__)


class ClockTicker:
    """Background thread that feeds ticks into an event sink.

    The first tick is posted immediately so the countdown and codes are
    populated before the first second elapses.
    """

    def __init__(
        self,
        sink: Callable[[TickEvent], None],
        interval: float = 1.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._sink = sink
        self._interval = interval
        self._clock = clock
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="twofa-ticker", daemon=True)
        self._thread.start()
        logger.debug("Ticker started (interval %.2fs)", self._interval)

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=self._interval * 2)
        self._thread = None
        logger.debug("Ticker stopped")

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self._sink(TickEvent(self._clock()))
            except Exception:
                logger.error("Tick sink failed", exc_info=True)
            self._stop_event.wait(self._interval)
