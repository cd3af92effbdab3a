"""Timer package."""

from .durations import Durations, DURATION_FIELDS
from .engine import CountdownEngine, TimerState
from .recovery import LifecycleRecovery, SnapshotStoreError, elapsed_seconds, utc_now
from .ticker import Ticker, TICK_INTERVAL_SECONDS

__all__ = [
    "Durations",
    "DURATION_FIELDS",
    "CountdownEngine",
    "TimerState",
    "LifecycleRecovery",
    "SnapshotStoreError",
    "elapsed_seconds",
    "utc_now",
    "Ticker",
    "TICK_INTERVAL_SECONDS",
]
