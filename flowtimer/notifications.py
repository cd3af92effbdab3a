"""Fallback notifications.

The countdown schedules a "work interval finished" notification when an
interval starts, so the user hears about it even if the process is not
running when the interval would end.  ``FallbackNotifier`` keeps one
single-shot ``QTimer`` per notification kind; scheduling a kind again
replaces the pending one.  Delivery is left to whoever listens on
``notification_due`` (the app shell re-emits it as
``notification_shown(title, body)``).
"""

from __future__ import annotations

from enum import Enum

from PyQt6.QtCore import QObject, QTimer, pyqtSignal


MAX_DELAY_SECONDS = 0xFFFF  # uint16


class NotificationKind(Enum):
    WORK_INTERVAL_FINISHED = "work_interval_finished"


NOTIFICATION_TEXT: dict[NotificationKind, tuple[str, str]] = {
    NotificationKind.WORK_INTERVAL_FINISHED: (
        "Interval finished",
        "Time for a break!",
    ),
}


class FallbackNotifier(QObject):

    notification_due = pyqtSignal(object)  # NotificationKind

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._enabled = True
        self._pending: dict[NotificationKind, QTimer] = {}
        self._delays: dict[NotificationKind, int] = {}

    # ── public API ────────────────────────────────────────────────────

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        if not enabled:
            for kind in list(self._pending):
                self.cancel_fallback_notification(kind)

    @property
    def enabled(self) -> bool:
        return self._enabled

    def schedule_fallback_notification(
        self, kind: NotificationKind, after_seconds: int,
    ) -> None:
        """(Re)schedule *kind* to fire *after_seconds* from now."""
        self.cancel_fallback_notification(kind)
        if not self._enabled:
            return
        after_seconds = max(0, min(int(after_seconds), MAX_DELAY_SECONDS))

        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.setInterval(after_seconds * 1000)
        timer.timeout.connect(lambda k=kind: self._deliver(k))
        self._pending[kind] = timer
        self._delays[kind] = after_seconds
        timer.start()

    def cancel_fallback_notification(self, kind: NotificationKind) -> None:
        timer = self._pending.pop(kind, None)
        self._delays.pop(kind, None)
        if timer is not None:
            timer.stop()
            timer.deleteLater()

    def is_scheduled(self, kind: NotificationKind) -> bool:
        return kind in self._pending

    def scheduled_delay(self, kind: NotificationKind) -> int | None:
        """Seconds *kind* was last scheduled for, if still pending."""
        return self._delays.get(kind)

    # ── internal ──────────────────────────────────────────────────────

    def _deliver(self, kind: NotificationKind) -> None:
        if kind not in self._pending:
            return
        self.cancel_fallback_notification(kind)
        self.notification_due.emit(kind)
