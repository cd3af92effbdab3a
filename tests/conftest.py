"""Shared pytest fixtures for FlowTimer tests."""

import sys
import pytest

from PyQt6.QtWidgets import QApplication

from flowtimer.database.db import configure_engine, init_db
from flowtimer.database.stores import DatabaseSnapshotStore, DurationStore
from flowtimer.events import EventNode
from flowtimer.notifications import FallbackNotifier
from flowtimer.timer.engine import CountdownEngine
from flowtimer.timer.recovery import LifecycleRecovery

from helpers import FakeClock


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def root():
    node = EventNode()
    yield node
    node.close()


@pytest.fixture
def duration_store(qapp):
    return DurationStore()


@pytest.fixture
def snapshot_store():
    return DatabaseSnapshotStore()


@pytest.fixture
def notifier(qapp):
    return FallbackNotifier()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(qapp, duration_store, root, notifier, snapshot_store):
    """Engine wired to the DB stores; 25-minute default work interval."""
    eng = CountdownEngine(
        durations_store=duration_store,
        event_parent=root,
        notifier=notifier,
        snapshot_store=snapshot_store,
    )
    yield eng
    eng.close()


@pytest.fixture
def recovery(engine, snapshot_store, clock):
    rec = LifecycleRecovery(engine, snapshot_store, clock=clock)
    yield rec
    rec.close()
