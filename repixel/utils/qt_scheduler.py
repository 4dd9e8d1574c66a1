from __future__ import annotations

from typing import Callable, Optional, Set

from PySide6.QtCore import QElapsedTimer, QObject, QTimer


class QtFrameScheduler:
    """Frame scheduler on the Qt event loop, one single-shot QTimer per frame."""

    def __init__(self, interval_ms: int = 16, parent: Optional[QObject] = None):
        self.interval_ms = int(interval_ms)
        self._parent = parent
        self._clock = QElapsedTimer()
        self._clock.start()
        self._timers: Set[QTimer] = set()

    def now(self) -> float:
        return self._clock.nsecsElapsed() / 1e6

    def request_frame(self, callback: Callable[[float], None]) -> QTimer:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.timeout.connect(lambda: self._fire(timer, callback))
        self._timers.add(timer)
        timer.start(self.interval_ms)
        return timer

    def cancel_frame(self, handle: QTimer) -> None:
        handle.stop()
        self._release(handle)

    def _fire(self, timer: QTimer, callback: Callable[[float], None]) -> None:
        self._release(timer)
        callback(self.now())

    def _release(self, timer: QTimer) -> None:
        if timer in self._timers:
            self._timers.discard(timer)
            timer.deleteLater()
