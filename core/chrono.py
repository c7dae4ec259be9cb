# core/chrono.py
from PySide6.QtCore import QObject, QTimer, Signal

from app.config import TICK_INTERVAL_MS


class SessionTicker(QObject):
    """The one periodic tick driving a session's clock checks."""

    tick = Signal()

    def __init__(self, tick_ms: int = TICK_INTERVAL_MS, parent=None):
        super().__init__(parent)
        self._running = False

        self._tick = QTimer(self)
        self._tick.setInterval(tick_ms)
        self._tick.timeout.connect(self._on_tick)

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self):
        # restarting never leaves a second timer behind
        self._tick.stop()
        self._running = True
        self._tick.start()

    def stop(self):
        if self._running:
            self._running = False
            self._tick.stop()

    def _on_tick(self):
        if self._running:
            self.tick.emit()
