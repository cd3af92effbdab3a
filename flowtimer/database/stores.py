"""Stores the countdown core talks to.

``DurationStore``
    Reads the configured lengths and announces per-field changes through
    the ``durations_changed(field, value)`` signal.
``DatabaseSnapshotStore``
    Keeps the single suspend timestamp.  Every SQLAlchemy failure is
    re-raised as ``SnapshotStoreError`` so callers can degrade without
    knowing about the database.
"""

from __future__ import annotations

from datetime import datetime

from PyQt6.QtCore import QObject, pyqtSignal
from sqlalchemy.exc import SQLAlchemyError

from ..timer.durations import Durations, DURATION_FIELDS
from ..timer.recovery import SnapshotStoreError
from .db import get_session
from .models import DurationsRecord, SuspendSnapshot


class DurationStore(QObject):

    durations_changed = pyqtSignal(str, int)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)

    def current_durations(self) -> Durations | None:
        """The configured durations, or None when nothing is stored."""
        with get_session() as db:
            record = db.query(DurationsRecord).first()
            if record is None:
                return None
            return Durations(
                work=record.work,
                short_break=record.short_break,
                long_break=record.long_break,
            )

    def set_duration(self, field: str, seconds: int) -> None:
        """Persist one field and notify observers if it changed."""
        if field not in DURATION_FIELDS:
            raise ValueError(f"unknown duration field: {field!r}")
        seconds = max(0, int(seconds))

        with get_session() as db:
            record = db.query(DurationsRecord).first()
            if record is None:
                record = DurationsRecord()
                db.add(record)
            changed = getattr(record, field) != seconds
            setattr(record, field, seconds)

        if changed:
            self.durations_changed.emit(field, seconds)


class DatabaseSnapshotStore:

    def save_suspended_at(self, timestamp: datetime) -> None:
        try:
            with get_session() as db:
                db.query(SuspendSnapshot).delete()
                db.add(SuspendSnapshot(suspended_at=timestamp))
        except SQLAlchemyError as exc:
            raise SnapshotStoreError(f"could not save suspend time: {exc}") from exc

    def load_suspended_at(self) -> datetime | None:
        try:
            with get_session() as db:
                record = db.query(SuspendSnapshot).first()
                return record.suspended_at if record else None
        except SQLAlchemyError as exc:
            raise SnapshotStoreError(f"could not load suspend time: {exc}") from exc

    def clear_suspended_at(self) -> None:
        try:
            with get_session() as db:
                db.query(SuspendSnapshot).delete()
        except SQLAlchemyError as exc:
            raise SnapshotStoreError(f"could not clear suspend time: {exc}") from exc
