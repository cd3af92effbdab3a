"""Countdown state machine for FlowTimer.

States
------
IDLE        Not running.  ``remaining`` may be the full work length or a
            partial count left over from a pause / suspend.
RUNNING     Ticker armed, one second comes off ``remaining`` per tick.
FINISHED    Transient.  Announced through ``state_changed`` when the
            countdown reaches 0, immediately followed by IDLE.

Transitions
-----------
IDLE → RUNNING          start()
RUNNING → IDLE          pause() / stop()
RUNNING → FINISHED      tick() reaches 0, or start() with 0 remaining
FINISHED → IDLE         immediately
Any → IDLE (full)       stop()

Completion is announced once per interval.  The flag guarding it is
cleared whenever ``remaining`` becomes positive again (stop, a new
duration, a recovery correction), so a resume that lands exactly on 0
finishes the interval but a second ``start()`` afterwards does not
finish it again.

A zero-length work interval has nothing to count: ``start()`` finishes it
at once without ``IntervalStarted`` or a fallback notification, and
later starts stay silent until a positive work length is set.

The engine performs no I/O of its own.  Everything observable leaves
through Qt signals, events raised on ``self.events``, ticker start/stop
and calls on the injected notifier / snapshot store.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum

from PyQt6.QtCore import QObject, pyqtSignal

from ..events import (
    EventNode,
    IntervalFinished,
    IntervalStarted,
    OpenSettings,
    OpenStatistics,
    Tick,
)
from ..notifications import NotificationKind
from .durations import Durations
from .recovery import SnapshotStoreError
from .ticker import Ticker


log = logging.getLogger(__name__)


class TimerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"


class CountdownEngine(QObject):
    """Qt-based work-interval countdown.

    Collaborators are injected; every one of them is optional so the
    state machine can be driven bare in tests.

    durations_store
        Anything with ``current_durations()`` and a
        ``durations_changed(str, int)`` signal.  Observed until ``close()``.
    event_parent
        Node the engine's own ``EventNode`` hangs off.  Timer and
        navigation events bubble up from there.
    notifier
        ``schedule_fallback_notification(kind, seconds)`` /
        ``cancel_fallback_notification(kind)``.
    snapshot_store
        Only ``clear_suspended_at()`` is used, from ``stop()``.

    Signals
    -------
    remaining_changed(remaining_seconds: int)
    running_changed(is_running: bool)
    state_changed(new_state: TimerState)
    """

    remaining_changed = pyqtSignal(int)
    running_changed = pyqtSignal(bool)
    state_changed = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        durations: Durations | None = None,
        durations_store=None,
        event_parent: EventNode | None = None,
        notifier=None,
        snapshot_store=None,
        ticker: Ticker | None = None,
    ) -> None:
        super().__init__(parent)

        # ── collaborators ─────────────────────────────────────────────
        self._store = durations_store
        self._notifier = notifier
        self._snapshot_store = snapshot_store
        self.events = EventNode(parent=event_parent)

        # ── configuration ─────────────────────────────────────────────
        if durations is None and durations_store is not None:
            durations = durations_store.current_durations()
        self._durations: Durations | None = durations

        # ── countdown state ───────────────────────────────────────────
        self._remaining: int = durations.work if durations else 0
        self._is_running: bool = False
        self._finish_announced: bool = False

        # ── ticker ────────────────────────────────────────────────────
        self._ticker = ticker or Ticker(self)
        self._ticker.fired.connect(self.tick)

        if self._store is not None:
            self._store.durations_changed.connect(self._on_durations_changed)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        return TimerState.RUNNING if self._is_running else TimerState.IDLE

    @property
    def remaining(self) -> int:
        """Seconds left on the clock."""
        return self._remaining

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def durations(self) -> Durations | None:
        return self._durations

    @property
    def ticker(self) -> Ticker:
        return self._ticker

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the work interval."""
        if self._durations is None or self._durations.work <= 0:
            return 0.0
        elapsed = self._durations.work - self._remaining
        return max(0.0, min(1.0, elapsed / self._durations.work))

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Start a fresh interval or resume a partial one."""
        if self._is_running or self._durations is None:
            return
        if self._remaining <= 0:
            # Nothing left to count: a resume that landed on 0.
            self._finish()
            return

        fresh = self._remaining == self._durations.work
        self._set_running(True)
        if fresh:
            self.events.raise_event(IntervalStarted(duration=self._durations.work))
            self._schedule_fallback(self._durations.work)
        else:
            self._schedule_fallback(self._remaining)
        self._ticker.start()
        self.state_changed.emit(TimerState.RUNNING)

    def tick(self) -> None:
        """Take one tick off the clock.  Ignored unless running."""
        if not self._is_running or self._durations is None:
            return
        self._set_remaining(self._remaining - self._ticker.interval_seconds)
        self.events.raise_event(Tick(remaining=self._remaining))
        if self._remaining == 0:
            self._finish()

    def pause(self, *, keep_fallback: bool = False) -> None:
        """Freeze the countdown.  Idempotent.

        A user pause cancels the pending fallback notification.  Pausing
        for a suspend passes ``keep_fallback=True`` so the user is still
        alerted if the process never comes back.
        """
        self._ticker.stop()
        if not keep_fallback:
            self._cancel_fallback()
        if self._is_running:
            self._set_running(False)
            self.state_changed.emit(TimerState.IDLE)

    def stop(self) -> None:
        """Cancel the interval and rewind to the full work length."""
        self._ticker.stop()
        was_running = self._is_running
        self._set_running(False)
        self._cancel_fallback()
        self._clear_snapshot()
        self._set_remaining(self._durations.work if self._durations else 0)
        if was_running:
            self.state_changed.emit(TimerState.IDLE)

    def set_durations(self, durations: Durations | None) -> None:
        """Replace the duration snapshot.  While idle the countdown snaps
        to the new work length."""
        self._durations = durations
        if not self._is_running:
            self._set_remaining(durations.work if durations else 0)

    def set_remaining(self, seconds: int) -> None:
        """Overwrite the count (clamped at 0).  Used by lifecycle recovery."""
        self._set_remaining(seconds)

    def request_settings(self) -> None:
        self.events.raise_event(OpenSettings())

    def request_statistics(self) -> None:
        self.events.raise_event(OpenStatistics())

    def close(self) -> None:
        """Stop ticking and release the store and bus subscriptions."""
        self._ticker.stop()
        self._set_running(False)
        self._cancel_fallback()
        if self._store is not None:
            self._store.durations_changed.disconnect(self._on_durations_changed)
            self._store = None
        self.events.close()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _finish(self) -> None:
        self._ticker.stop()
        self._set_running(False)
        self._cancel_fallback()
        if self._finish_announced:
            return
        self._finish_announced = True
        self.state_changed.emit(TimerState.FINISHED)
        self.events.raise_event(IntervalFinished(duration=self._durations.work))
        self.state_changed.emit(TimerState.IDLE)

    def _on_durations_changed(self, field: str, value: int) -> None:
        if self._durations is None:
            updated = self._store.current_durations() if self._store else None
        else:
            updated = replace(self._durations, **{field: value})
        if field == "work":
            self.set_durations(updated)
        else:
            self._durations = updated

    def _set_remaining(self, seconds: int) -> None:
        seconds = max(0, seconds)
        if seconds > 0:
            self._finish_announced = False
        if seconds != self._remaining:
            self._remaining = seconds
            self.remaining_changed.emit(seconds)

    def _set_running(self, running: bool) -> None:
        if running != self._is_running:
            self._is_running = running
            self.running_changed.emit(running)

    def _schedule_fallback(self, seconds: int) -> None:
        if self._notifier is not None:
            self._notifier.schedule_fallback_notification(
                NotificationKind.WORK_INTERVAL_FINISHED, seconds,
            )

    def _cancel_fallback(self) -> None:
        if self._notifier is not None:
            self._notifier.cancel_fallback_notification(
                NotificationKind.WORK_INTERVAL_FINISHED,
            )

    def _clear_snapshot(self) -> None:
        if self._snapshot_store is None:
            return
        try:
            self._snapshot_store.clear_suspended_at()
        except SnapshotStoreError as exc:
            log.warning("Could not clear suspend snapshot on stop: %s", exc)
