"""Shared test helpers for FlowTimer."""

from datetime import datetime, timedelta

from flowtimer.events import EventCategory, EventNode
from flowtimer.timer.recovery import SnapshotStoreError


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class EventRecorder:
    """Records every event of *category* reaching *node*."""

    def __init__(self, node: EventNode, category: EventCategory):
        self.events: list = []
        self.subscription = node.subscribe(category, self.events.append)

    def of_type(self, event_type) -> list:
        return [e for e in self.events if isinstance(e, event_type)]

    def count(self, event_type) -> int:
        return len(self.of_type(event_type))


class FakeClock:
    """Injectable ``datetime.now`` replacement."""

    def __init__(self, start: datetime = datetime(2026, 3, 2, 9, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FailingSnapshotStore:
    """Snapshot store whose selected operations raise."""

    def __init__(self, *, fail_save=False, fail_load=False, fail_clear=False,
                 suspended_at=None):
        self.fail_save = fail_save
        self.fail_load = fail_load
        self.fail_clear = fail_clear
        self.suspended_at = suspended_at

    def save_suspended_at(self, timestamp):
        if self.fail_save:
            raise SnapshotStoreError("disk full")
        self.suspended_at = timestamp

    def load_suspended_at(self):
        if self.fail_load:
            raise SnapshotStoreError("database is locked")
        return self.suspended_at

    def clear_suspended_at(self):
        if self.fail_clear:
            raise SnapshotStoreError("database is locked")
        self.suspended_at = None


class RecordingSink:
    """Alert sink that remembers what it was asked to play."""

    def __init__(self):
        self.played: list = []
        self.volume = None
        self.enabled = None
        self.vibration_enabled = None

    def play(self, kind, with_vibration=False):
        self.played.append((kind, with_vibration))

    def set_volume(self, level):
        self.volume = level

    def set_enabled(self, enabled):
        self.enabled = enabled

    def set_vibration_enabled(self, enabled):
        self.vibration_enabled = enabled


def run_ticks(engine, count: int) -> None:
    for _ in range(count):
        engine.tick()
