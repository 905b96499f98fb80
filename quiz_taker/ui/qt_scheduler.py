"""QTimer-backed tick source for the desktop widget."""

from __future__ import annotations

from PySide6.QtCore import QObject, QTimer

from quiz_taker.constants.quiz_constants import TICK_INTERVAL_SECONDS
from quiz_taker.core.services.scheduler import TickCallback


class QtTickScheduler:
    """Fires the tick callback on the Qt event loop."""

    def __init__(self, parent: QObject | None = None, interval_seconds: float = TICK_INTERVAL_SECONDS) -> None:
        self._timer = QTimer(parent)
        self._timer.setInterval(int(interval_seconds * 1000))
        self._callback: TickCallback | None = None
        self._timer.timeout.connect(self._handle_timeout)

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self, callback: TickCallback) -> None:
        self._callback = callback
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()
        self._callback = None

    def _handle_timeout(self) -> None:
        if self._callback is not None:
            self._callback()
