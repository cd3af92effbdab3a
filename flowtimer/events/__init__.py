"""Event bus package."""

from .bus import EventNode, Propagation, Subscription
from .types import (
    DomainEvent,
    EventCategory,
    EnteredBackground,
    EnteredForeground,
    OpenSettings,
    OpenStatistics,
    Tick,
    IntervalStarted,
    IntervalFinished,
)

__all__ = [
    "EventNode",
    "Propagation",
    "Subscription",
    "DomainEvent",
    "EventCategory",
    "EnteredBackground",
    "EnteredForeground",
    "OpenSettings",
    "OpenStatistics",
    "Tick",
    "IntervalStarted",
    "IntervalFinished",
]
