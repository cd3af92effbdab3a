"""Routes countdown events to the alert sink."""

from __future__ import annotations

from .audio.sounds import AlertKind
from .events import (
    DomainEvent,
    EventCategory,
    EventNode,
    IntervalFinished,
    IntervalStarted,
    Tick,
)


# event type → (sound, vibrate)
ALERTS: dict[type, tuple[AlertKind, bool]] = {
    IntervalStarted: (AlertKind.START, True),
    Tick: (AlertKind.TICK, False),
    IntervalFinished: (AlertKind.FINISH, True),
}


class AlertRouter:
    """Plays the matching alert for every timer event reaching *node*.

    *sink* is anything with ``play(kind, with_vibration=...)``; normally
    the ``SoundManager``.
    """

    def __init__(self, node: EventNode, sink) -> None:
        self._sink = sink
        self._subscription = node.subscribe(EventCategory.TIMER, self._on_timer_event)

    def close(self) -> None:
        self._subscription.cancel()

    def _on_timer_event(self, event: DomainEvent) -> None:
        alert = ALERTS.get(type(event))
        if alert is None:
            return
        kind, vibrate = alert
        self._sink.play(kind, with_vibration=vibrate)
