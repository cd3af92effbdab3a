"""Keep the countdown honest across host suspension.

When the host process goes to the background the countdown is paused
and the wall-clock time is written to the snapshot store.  On return
the time spent away is taken off ``remaining`` and the countdown
resumes.  An interval that ran out while suspended finishes on resume,
exactly once.

Snapshot I/O never takes the countdown down: store failures are logged
and treated as "no suspension happened".
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable

from ..events import (
    DomainEvent,
    EnteredBackground,
    EnteredForeground,
    EventCategory,
)

if TYPE_CHECKING:
    from .engine import CountdownEngine


log = logging.getLogger(__name__)


class SnapshotStoreError(Exception):
    """Reading or writing the suspend snapshot failed."""


def utc_now() -> datetime:
    """Naive UTC wall-clock time.

    Local time jumps at DST changes; UTC does not, so suspend and resume
    marks taken with this clock subtract cleanly.  Naive to match the
    SQLite ``DateTime`` column.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def elapsed_seconds(since, now: datetime) -> int:
    """Whole seconds from *since* to *now*, floored.

    Anything unusable (not a datetime, naive vs aware, a clock that went
    backwards) counts as no time elapsed.
    """
    if not isinstance(since, datetime):
        return 0
    try:
        delta = now - since
    except TypeError:
        return 0
    return max(0, int(delta.total_seconds()))


class LifecycleRecovery:
    """Subscribes to lifecycle events on the engine's node.

    Usage::

        recovery = LifecycleRecovery(engine, DatabaseSnapshotStore())
        root.propagate(EnteredBackground())   # pauses + saves timestamp
        root.propagate(EnteredForeground())   # corrects + resumes
    """

    def __init__(
        self,
        engine: CountdownEngine,
        snapshot_store,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._engine = engine
        self._store = snapshot_store
        self._clock = clock
        self._subscription = engine.events.subscribe(
            EventCategory.LIFECYCLE, self._on_lifecycle,
        )

    def close(self) -> None:
        self._subscription.cancel()

    # ── handlers ──────────────────────────────────────────────────────

    def _on_lifecycle(self, event: DomainEvent) -> None:
        if isinstance(event, EnteredBackground):
            self.on_background()
        elif isinstance(event, EnteredForeground):
            self.on_foreground()

    def on_background(self) -> None:
        if not self._engine.is_running:
            return
        self._engine.pause(keep_fallback=True)
        try:
            self._store.save_suspended_at(self._clock())
        except SnapshotStoreError as exc:
            log.warning("Could not save suspend time, countdown stays paused: %s", exc)

    def on_foreground(self) -> None:
        try:
            suspended_at = self._store.load_suspended_at()
        except SnapshotStoreError as exc:
            log.warning("Could not read suspend time, assuming no suspension: %s", exc)
            return
        if suspended_at is None:
            return

        try:
            self._store.clear_suspended_at()
        except SnapshotStoreError as exc:
            log.warning("Could not clear suspend time: %s", exc)

        if self._engine.is_running:
            # Restarted by hand while away; the snapshot is stale.
            return

        elapsed = elapsed_seconds(suspended_at, self._clock())
        corrected = max(0, self._engine.remaining - elapsed)
        log.debug(
            "Resuming after %ss away: %s -> %s",
            elapsed, self._engine.remaining, corrected,
        )
        self._engine.set_remaining(corrected)
        self._engine.start()
