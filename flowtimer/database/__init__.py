"""Database package."""

from .db import get_session, init_db
from .models import DurationsRecord, SuspendSnapshot
from .stores import DurationStore, DatabaseSnapshotStore, SnapshotStoreError

__all__ = [
    "get_session",
    "init_db",
    "DurationsRecord",
    "SuspendSnapshot",
    "DurationStore",
    "DatabaseSnapshotStore",
    "SnapshotStoreError",
]
