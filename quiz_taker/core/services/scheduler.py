"""Periodic tick sources that drive the quiz countdown."""

from __future__ import annotations

import logging
from threading import Event, Thread, current_thread
from typing import Callable, Protocol

from quiz_taker.constants.quiz_constants import TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class TickScheduler(Protocol):
    """Calls a callback once per interval until stopped."""

    @property
    def is_running(self) -> bool: ...

    def start(self, callback: TickCallback) -> None: ...

    def stop(self) -> None: ...


class IntervalTickScheduler:
    """Runs the callback from a background daemon thread."""

    def __init__(self, interval_seconds: float = TICK_INTERVAL_SECONDS) -> None:
        self._interval = interval_seconds
        self._stop_event = Event()
        self._thread: Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self, callback: TickCallback) -> None:
        self.stop()
        stop_event = Event()
        self._stop_event = stop_event

        def run() -> None:
            while not stop_event.wait(self._interval):
                try:
                    callback()
                except Exception:
                    logger.exception("Tick callback failed; stopping the timer")
                    stop_event.set()

        self._thread = Thread(target=run, name="QuizTickScheduler", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        thread = self._thread
        self._thread = None
        # The callback may stop its own scheduler; never join the current thread.
        if thread is not None and thread is not current_thread():
            thread.join(timeout=self._interval * 2)


class ManualTickScheduler:
    """Scheduler that only ticks when ``fire`` is called."""

    def __init__(self) -> None:
        self._callback: TickCallback | None = None

    @property
    def is_running(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback) -> None:
        self._callback = callback

    def stop(self) -> None:
        self._callback = None

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            if self._callback is None:
                return
            self._callback()
