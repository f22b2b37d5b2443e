# chronos/core/clock.py
from PySide6.QtCore import QObject, QTimer, Signal


class Clock(QObject):
    """
    Repeating tick owned by whoever creates it.
    - start() is idempotent (never double-subscribes)
    - stop() always cancels, safe to call any number of times
    """
    tick = Signal()

    def __init__(self, interval_ms: int = 1000, parent=None):
        super().__init__(parent)
        self._timer = QTimer(self)
        self._timer.setInterval(int(interval_ms))
        self._timer.timeout.connect(self.tick)

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self):
        if self._timer.isActive():
            return
        self._timer.start()

    def stop(self):
        if self._timer.isActive():
            self._timer.stop()

    def set_interval(self, interval_ms: int):
        self._timer.setInterval(int(interval_ms))
