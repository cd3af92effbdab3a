"""Configured interval lengths."""

from __future__ import annotations

from dataclasses import dataclass


DURATION_FIELDS = ("work", "short_break", "long_break")


@dataclass(frozen=True)
class Durations:
    """Snapshot of the configured lengths, in seconds."""

    work: int = 25 * 60
    short_break: int = 5 * 60
    long_break: int = 15 * 60

    def __post_init__(self) -> None:
        for name in DURATION_FIELDS:
            if getattr(self, name) < 0:
                raise ValueError(f"{name} duration must be non-negative")
