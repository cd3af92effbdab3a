"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/FlowTimer/settings.json

Usage::

    settings = load_settings()
    settings.work_duration = 50 * 60
    save_settings(settings)

Durations here only seed the database on first run; afterwards the
``durations`` table is authoritative (see ``database.stores``).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path


log = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "FlowTimer"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

DURATION_KEYS = ("work_duration", "short_break_duration", "long_break_duration")


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    work_duration: int = 25 * 60           # seconds
    short_break_duration: int = 5 * 60
    long_break_duration: int = 15 * 60

    # ── alerts ────────────────────────────────────────────────────────
    sound_enabled: bool = True
    sound_volume: int = 70                 # 0-100
    vibration_enabled: bool = True

    # ── notifications ─────────────────────────────────────────────────
    notifications_enabled: bool = True


def _is_seconds(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            for key in DURATION_KEYS:
                value = filtered.get(key)
                if key in filtered and not _is_seconds(value):
                    log.warning("Ignoring invalid %s %r in %s", key, value, SETTINGS_PATH)
                    del filtered[key]
            return Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        log.warning("Ignoring unreadable settings file %s: %s", SETTINGS_PATH, exc)
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
