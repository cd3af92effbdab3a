"""Domain events carried by the event bus.

Every event is an immutable dataclass tagged with an ``EventCategory``.
Handlers subscribe per category, not per event class.

Categories
----------
LIFECYCLE     Host process lost / regained foreground execution.
NAVIGATION    Requests for the UI layer (open settings, open statistics).
TIMER         Countdown alerts (tick, interval started, interval finished).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class EventCategory(Enum):
    LIFECYCLE = "lifecycle"
    NAVIGATION = "navigation"
    TIMER = "timer"


@dataclass(frozen=True)
class DomainEvent:
    category: ClassVar[EventCategory]


# ── lifecycle ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class EnteredBackground(DomainEvent):
    category: ClassVar[EventCategory] = EventCategory.LIFECYCLE


@dataclass(frozen=True)
class EnteredForeground(DomainEvent):
    category: ClassVar[EventCategory] = EventCategory.LIFECYCLE


# ── navigation ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class OpenSettings(DomainEvent):
    category: ClassVar[EventCategory] = EventCategory.NAVIGATION


@dataclass(frozen=True)
class OpenStatistics(DomainEvent):
    category: ClassVar[EventCategory] = EventCategory.NAVIGATION


# ── timer ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Tick(DomainEvent):
    category: ClassVar[EventCategory] = EventCategory.TIMER

    remaining: int


@dataclass(frozen=True)
class IntervalStarted(DomainEvent):
    category: ClassVar[EventCategory] = EventCategory.TIMER

    duration: int


@dataclass(frozen=True)
class IntervalFinished(DomainEvent):
    category: ClassVar[EventCategory] = EventCategory.TIMER

    duration: int
