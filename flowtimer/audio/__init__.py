"""Audio package."""

from .sounds import SoundManager, AlertKind

__all__ = ["SoundManager", "AlertKind"]
