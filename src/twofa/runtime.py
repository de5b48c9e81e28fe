"""Event loop that drives the workflow.

Three producers feed one queue:
  - the clock ticker (TickEvent, once per interval)
  - the keyboard reader thread (KeyEvent)
  - verification workers (VerifyResult)

The calling thread is the only consumer. It applies each event to the
workflow, hands the new snapshot to the renderer and carries out effects.
Workers get their inputs by value and never see workflow state.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable

from twofa import engine
from twofa.events import Effect, Event, KeyEvent, Quit, VerifyCode, VerifyResult
from twofa.models import Snapshot
from twofa.ticker import ClockTicker
from twofa.workflow import AppState, Workflow, snapshot

logger = logging.getLogger(__name__)

_STOP = object()


def _no_render(view: Snapshot) -> None:
    pass


class Runtime:
    def __init__(
        self,
        workflow: Workflow,
        render: Callable[[Snapshot], None] = _no_render,
        key_source: Callable[[], KeyEvent | None] | None = None,
        tick_interval: float = 1.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._workflow = workflow
        self._render = render
        self._key_source = key_source
        self._events: queue.Queue = queue.Queue()
        self._ticker = ClockTicker(self.post, interval=tick_interval, clock=clock)
        self.state: AppState = workflow.initial_state()

    # -- producers -------------------------------------------------------------

    def post(self, event: Event) -> None:
        """Queue an event. Safe to call from any thread."""
        self._events.put(event)

    def stop(self) -> None:
        """Ask the loop to exit after the events already queued."""
        self._events.put(_STOP)

    def _read_keys(self) -> None:
        while True:
            try:
                event = self._key_source()
            except (KeyboardInterrupt, EOFError):
                logger.debug("Keyboard interrupt, stopping")
                self.stop()
                return
            except Exception:
                logger.error("Keyboard reader failed, stopping", exc_info=True)
                self.stop()
                return
            if event is not None:
                self.post(event)

    def _verify(self, request: VerifyCode) -> None:
        try:
            valid = engine.validate_code(request.secret, request.candidate, request.timestamp)
        except Exception:
            logger.error("Verification worker failed for account #%d", request.account_index, exc_info=True)
            valid = False
        self.post(VerifyResult(request.account_index, valid, request.session))

    def start_verification(self, request: VerifyCode) -> threading.Thread:
        t = threading.Thread(target=self._verify, args=(request,), name="twofa-verify", daemon=True)
        t.start()
        return t

    # -- consumer --------------------------------------------------------------

    def next_event(self, timeout: float | None = None) -> Event | None:
        """Take the next queued event; None if the loop was asked to stop."""
        item = self._events.get(timeout=timeout)
        if item is _STOP:
            return None
        return item

    def process(self, event: Event) -> bool:
        """Apply one event. Returns False once the workflow asks to quit."""
        self.state, effects = self._workflow.reduce(self.state, event)
        self._render(snapshot(self.state))
        return self._execute(effects)

    def _execute(self, effects: list[Effect]) -> bool:
        keep_running = True
        for effect in effects:
            if isinstance(effect, VerifyCode):
                self.start_verification(effect)
            elif isinstance(effect, Quit):
                keep_running = False
            else:
                raise TypeError(f"unknown effect: {effect!r}")
        return keep_running

    def run(self) -> AppState:
        """Run until the workflow quits or the keyboard is interrupted. Returns the final state."""
        self._render(snapshot(self.state))
        if self._key_source is not None:
            threading.Thread(target=self._read_keys, name="twofa-keys", daemon=True).start()
        self._ticker.start()
        try:
            while True:
                event = self.next_event()
                if event is None or not self.process(event):
                    break
        finally:
            self._ticker.stop()
        logger.info("Event loop finished with %d account(s)", len(self.state.store))
        return self.state
