"""Tests for the application shell and the host-facing adapters.

Covers:
- FlowTimerApp wiring: alerts, navigation, settings, teardown
- Suspend/resume driven by Qt application states
- HostLifecycleSource state mapping
- FallbackNotifier scheduling and delivery
- Ticker driving the engine from a live event loop
"""

from __future__ import annotations

import json

import pytest
from PyQt6.QtCore import Qt
from PyQt6.QtTest import QTest

from flowtimer.app import FlowTimerApp, format_remaining
from flowtimer.audio.sounds import AlertKind
from flowtimer.database.db import configure_engine, init_db
from flowtimer.events import (
    EnteredBackground,
    EnteredForeground,
    EventCategory,
    EventNode,
)
from flowtimer.lifecycle import HostLifecycleSource
from flowtimer.notifications import NotificationKind
from flowtimer.settings import Settings, load_settings
from flowtimer.timer.durations import Durations
from flowtimer.timer.engine import CountdownEngine
from flowtimer.timer.recovery import utc_now

from helpers import EventRecorder, RecordingSink, SignalCollector, run_ticks


WORK = NotificationKind.WORK_INTERVAL_FINISHED
State = Qt.ApplicationState


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def app(qapp, sink, clock):
    timer_app = FlowTimerApp(settings=Settings(), sound_manager=sink, clock=clock)
    yield timer_app
    timer_app.close()


# ═══════════════════════════════════════════════════════════════════════
#  APPLICATION SHELL
# ═══════════════════════════════════════════════════════════════════════


class TestFlowTimerApp:

    def test_engine_starts_from_stored_durations(self, app):
        assert app.engine.remaining == 1500
        assert app.engine.durations == Durations()

    def test_alert_settings_applied(self, sink, app):
        assert sink.volume == 70
        assert sink.enabled is True
        assert sink.vibration_enabled is True

    def test_countdown_alerts(self, app, sink):
        app.engine.start()
        run_ticks(app.engine, 2)
        assert sink.played == [
            (AlertKind.START, True),
            (AlertKind.TICK, False),
            (AlertKind.TICK, False),
        ]

    def test_finish_alert_vibrates(self, app, sink):
        app.apply_settings(Settings(work_duration=2))
        app.engine.start()
        run_ticks(app.engine, 2)
        assert sink.played[-1] == (AlertKind.FINISH, True)
        assert app.engine.is_running is False

    def test_suspend_and_resume_through_qt_states(self, app, clock, sink):
        app.engine.start()
        run_ticks(app.engine, 3)

        app.lifecycle.handle_state(State.ApplicationHidden)
        assert app.engine.is_running is False

        clock.advance(10)
        app.lifecycle.handle_state(State.ApplicationActive)
        assert app.engine.remaining == 1487
        assert app.engine.is_running is True
        assert sink.played.count((AlertKind.START, True)) == 1

    def test_inactive_window_keeps_counting(self, app):
        app.engine.start()
        app.lifecycle.handle_state(State.ApplicationInactive)
        assert app.engine.is_running is True

    def test_navigation_signals(self, app):
        settings, stats = SignalCollector(), SignalCollector()
        app.settings_requested.connect(settings)
        app.statistics_requested.connect(stats)
        app.engine.request_settings()
        app.engine.request_statistics()
        assert len(settings) == 1
        assert len(stats) == 1

    def test_due_notification_is_shown(self, app):
        c = SignalCollector()
        app.notification_shown.connect(c)
        app.engine.start()
        app.notifier._deliver(WORK)
        assert c.last == ("Interval finished", "Time for a break!")

    def test_apply_settings_leaves_running_countdown(self, app, sink):
        app.engine.start()
        app.engine.tick()
        app.apply_settings(Settings(work_duration=600, sound_volume=20))
        assert app.engine.remaining == 1499
        assert app.engine.durations.work == 600
        assert sink.volume == 20

        app.engine.stop()
        assert app.engine.remaining == 600

    def test_apply_settings_while_idle(self, app):
        app.apply_settings(Settings(work_duration=45 * 60))
        assert app.engine.remaining == 45 * 60
        assert app.duration_store.current_durations().work == 45 * 60

    def test_notifications_disabled(self, app):
        app.apply_settings(Settings(notifications_enabled=False))
        app.engine.start()
        assert app.notifier.is_scheduled(WORK) is False

    def test_close_tears_down_event_tree(self, qapp, sink, clock):
        timer_app = FlowTimerApp(settings=Settings(), sound_manager=sink, clock=clock)
        timer_app.engine.start()
        timer_app.close()
        assert timer_app.events.closed is True
        assert timer_app.engine.events.closed is True
        assert timer_app.engine.is_running is False
        timer_app.events.propagate(EnteredBackground())
        timer_app.engine.request_settings()
        assert sink.played == [(AlertKind.START, True)]

    def test_starts_from_hand_edited_settings(self, qapp, sink, tmp_path, monkeypatch):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"work_duration": -300}), encoding="utf-8")
        monkeypatch.setattr("flowtimer.settings.SETTINGS_PATH", path)
        configure_engine("sqlite:///:memory:")
        settings = load_settings()
        init_db(settings)
        timer_app = FlowTimerApp(settings=settings, sound_manager=sink)
        assert timer_app.engine.remaining == 1500
        timer_app.close()

    def test_defaults_to_utc_clock(self, qapp, sink):
        timer_app = FlowTimerApp(settings=Settings(), sound_manager=sink)
        assert timer_app._recovery._clock is utc_now
        timer_app.close()

    @pytest.mark.parametrize("seconds, text", [
        (1500, "25:00"),
        (1487, "24:47"),
        (59, "00:59"),
        (0, "00:00"),
        (-3, "00:00"),
    ])
    def test_format_remaining(self, seconds, text):
        assert format_remaining(seconds) == text


# ═══════════════════════════════════════════════════════════════════════
#  HOST LIFECYCLE SOURCE
# ═══════════════════════════════════════════════════════════════════════


class TestHostLifecycleSource:

    def test_state_mapping_and_repeats(self, qapp):
        root = EventNode()
        recorder = EventRecorder(root, EventCategory.LIFECYCLE)
        source = HostLifecycleSource(root)
        for state in (
            State.ApplicationHidden,
            State.ApplicationSuspended,
            State.ApplicationInactive,
            State.ApplicationActive,
            State.ApplicationActive,
            State.ApplicationSuspended,
        ):
            source.handle_state(state)
        assert recorder.events == [
            EnteredBackground(),
            EnteredForeground(),
            EnteredBackground(),
        ]

    def test_events_reach_child_nodes(self, qapp):
        root = EventNode()
        child = EventNode(parent=root)
        recorder = EventRecorder(child, EventCategory.LIFECYCLE)
        HostLifecycleSource(root).handle_state(State.ApplicationHidden)
        assert recorder.events == [EnteredBackground()]

    def test_attach_and_detach(self, qapp):
        source = HostLifecycleSource(EventNode())
        source.attach(qapp)
        source.detach()
        source.detach()


# ═══════════════════════════════════════════════════════════════════════
#  FALLBACK NOTIFIER
# ═══════════════════════════════════════════════════════════════════════


class TestFallbackNotifier:

    def test_schedule(self, notifier):
        notifier.schedule_fallback_notification(WORK, 1500)
        assert notifier.is_scheduled(WORK)
        assert notifier.scheduled_delay(WORK) == 1500

    def test_delay_clamped_to_uint16(self, notifier):
        notifier.schedule_fallback_notification(WORK, 100_000)
        assert notifier.scheduled_delay(WORK) == 65535
        notifier.schedule_fallback_notification(WORK, -5)
        assert notifier.scheduled_delay(WORK) == 0

    def test_reschedule_replaces(self, notifier):
        notifier.schedule_fallback_notification(WORK, 1500)
        notifier.schedule_fallback_notification(WORK, 300)
        assert notifier.scheduled_delay(WORK) == 300
        assert len(notifier._pending) == 1

    def test_cancel(self, notifier):
        notifier.schedule_fallback_notification(WORK, 1500)
        notifier.cancel_fallback_notification(WORK)
        assert notifier.is_scheduled(WORK) is False
        assert notifier.scheduled_delay(WORK) is None

    def test_disabled_does_not_schedule(self, notifier):
        notifier.set_enabled(False)
        notifier.schedule_fallback_notification(WORK, 1500)
        assert notifier.is_scheduled(WORK) is False

    def test_disabling_cancels_pending(self, notifier):
        notifier.schedule_fallback_notification(WORK, 1500)
        notifier.set_enabled(False)
        assert notifier.is_scheduled(WORK) is False

    def test_delivers_once(self, notifier):
        c = SignalCollector()
        notifier.notification_due.connect(c)
        notifier.schedule_fallback_notification(WORK, 1500)
        notifier._deliver(WORK)
        notifier._deliver(WORK)
        assert c.items == [WORK]
        assert notifier.is_scheduled(WORK) is False

    def test_fires_from_event_loop(self, notifier):
        c = SignalCollector()
        notifier.notification_due.connect(c)
        notifier.schedule_fallback_notification(WORK, 0)
        QTest.qWait(50)
        assert c.items == [WORK]


# ═══════════════════════════════════════════════════════════════════════
#  LIVE TICKER
# ═══════════════════════════════════════════════════════════════════════


class TestLiveTicker:

    def test_ticker_drives_engine(self, qapp):
        eng = CountdownEngine(durations=Durations(work=60))
        eng.start()
        QTest.qWait(1150)
        eng.pause()
        assert eng.remaining == 59

    def test_no_ticks_after_pause(self, qapp):
        eng = CountdownEngine(durations=Durations(work=60))
        eng.start()
        eng.pause()
        QTest.qWait(1150)
        assert eng.remaining == 60
