"""Application shell: builds the event tree and wires every collaborator
around the countdown engine.

    root EventNode ── AlertRouter (TIMER)          → SoundManager
         │        └── navigation handler (NAVIGATION) → *_requested signals
         └── engine.events ── LifecycleRecovery (LIFECYCLE)

Host lifecycle events enter at the root and are propagated down; timer
and navigation events are raised on the engine's node and bubble up.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtGui import QGuiApplication

from .alerts import AlertRouter
from .audio.sounds import SoundManager
from .database.stores import DatabaseSnapshotStore, DurationStore
from .events import DomainEvent, EventCategory, EventNode, OpenSettings, OpenStatistics
from .lifecycle import HostLifecycleSource
from .notifications import FallbackNotifier, NotificationKind, NOTIFICATION_TEXT
from .settings import Settings, load_settings
from .timer.engine import CountdownEngine
from .timer.recovery import LifecycleRecovery, utc_now


log = logging.getLogger(__name__)


def format_remaining(seconds: int) -> str:
    m, s = divmod(max(0, seconds), 60)
    return f"{m:02d}:{s:02d}"


class FlowTimerApp(QObject):
    """Headless application object.

    Signals
    -------
    settings_requested()
    statistics_requested()
    notification_shown(title: str, body: str)
        A fallback notification came due while the process was alive.
    """

    settings_requested = pyqtSignal()
    statistics_requested = pyqtSignal()
    notification_shown = pyqtSignal(str, str)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        settings: Settings | None = None,
        sound_manager=None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        super().__init__(parent)

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = settings or load_settings()

        # ── event tree root ───────────────────────────────────────────
        self._events = EventNode()

        # ── stores & sinks ────────────────────────────────────────────
        self._duration_store = DurationStore(self)
        self._snapshot_store = DatabaseSnapshotStore()
        self._notifier = FallbackNotifier(self)
        self._sound_manager = sound_manager or SoundManager(parent=self)

        # ── engine + recovery ─────────────────────────────────────────
        self._engine = CountdownEngine(
            self,
            durations_store=self._duration_store,
            event_parent=self._events,
            notifier=self._notifier,
            snapshot_store=self._snapshot_store,
        )
        self._recovery = LifecycleRecovery(
            self._engine, self._snapshot_store, clock=clock,
        )

        # ── routing ───────────────────────────────────────────────────
        self._alerts = AlertRouter(self._events, self._sound_manager)
        self._navigation = self._events.subscribe(
            EventCategory.NAVIGATION, self._on_navigation,
        )
        self._lifecycle = HostLifecycleSource(self._events, self)

        # ── wire signals ──────────────────────────────────────────────
        self._notifier.notification_due.connect(self._on_notification_due)

        self._apply_alert_settings()

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    @property
    def engine(self) -> CountdownEngine:
        return self._engine

    @property
    def events(self) -> EventNode:
        return self._events

    @property
    def duration_store(self) -> DurationStore:
        return self._duration_store

    @property
    def notifier(self) -> FallbackNotifier:
        return self._notifier

    @property
    def lifecycle(self) -> HostLifecycleSource:
        return self._lifecycle

    @property
    def settings(self) -> Settings:
        return self._settings

    def attach_host(self, app: QGuiApplication) -> None:
        """Follow *app*'s foreground / background transitions."""
        self._lifecycle.attach(app)

    def apply_settings(self, settings: Settings) -> None:
        """Push *settings* into the duration store and the alert sinks.

        Duration changes reach the engine through the store's change
        signal, so a running countdown is left alone.
        """
        self._settings = settings
        self._duration_store.set_duration("work", settings.work_duration)
        self._duration_store.set_duration("short_break", settings.short_break_duration)
        self._duration_store.set_duration("long_break", settings.long_break_duration)
        self._apply_alert_settings()

    def close(self) -> None:
        self._lifecycle.detach()
        self._recovery.close()
        self._alerts.close()
        self._navigation.cancel()
        self._engine.close()
        self._events.close()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _apply_alert_settings(self) -> None:
        s = self._settings
        self._sound_manager.set_volume(s.sound_volume)
        self._sound_manager.set_enabled(s.sound_enabled)
        self._sound_manager.set_vibration_enabled(s.vibration_enabled)
        self._notifier.set_enabled(s.notifications_enabled)

    def _on_navigation(self, event: DomainEvent) -> None:
        if isinstance(event, OpenSettings):
            self.settings_requested.emit()
        elif isinstance(event, OpenStatistics):
            self.statistics_requested.emit()

    def _on_notification_due(self, kind: NotificationKind) -> None:
        title, body = NOTIFICATION_TEXT[kind]
        log.info("Fallback notification due: %s", kind.value)
        self.notification_shown.emit(title, body)
