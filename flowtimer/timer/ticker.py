"""Recurring tick source built on ``QTimer``.

``stop()`` disarms the ticker before stopping the Qt timer, so a timeout
that was already queued on the event loop when ``stop()`` returned is
dropped instead of reaching ``fired`` subscribers.
"""

from __future__ import annotations

from PyQt6.QtCore import QObject, QTimer, pyqtSignal


TICK_INTERVAL_SECONDS = 1


class Ticker(QObject):

    fired = pyqtSignal()

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        interval_seconds: int = TICK_INTERVAL_SECONDS,
    ) -> None:
        super().__init__(parent)
        self._interval_seconds = interval_seconds
        self._armed = False

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(interval_seconds * 1000)
        self._qt_timer.timeout.connect(self._on_timeout)

    @property
    def interval_seconds(self) -> int:
        return self._interval_seconds

    @property
    def is_active(self) -> bool:
        return self._armed

    def start(self) -> None:
        if self._armed:
            return
        self._armed = True
        self._qt_timer.start()

    def stop(self) -> None:
        self._armed = False
        self._qt_timer.stop()

    def _on_timeout(self) -> None:
        if not self._armed:
            return
        self.fired.emit()
