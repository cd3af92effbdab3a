"""Alert sounds: numpy synthesis, QSoundEffect playback.

The three countdown alerts are generated as WAV files (sine waves shaped
by an ADSR envelope) and cached on disk, so later launches skip the
synthesis.

Alerts
------
- ``START``   rising three-note chime, with vibration
- ``TICK``    short wooden click once per second, no vibration
- ``FINISH``  four-note arpeggio with a held top note, with vibration

Desktop hosts have no vibration motor; vibration requests are surfaced
through the ``vibration_requested`` signal for hosts that can buzz.
"""

from __future__ import annotations

import io
import wave
from enum import Enum
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl, pyqtSignal
from PyQt6.QtMultimedia import QSoundEffect


# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "FlowTimer"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SAMPLE_RATE = 44100


class AlertKind(Enum):
    START = "start_countdown"
    TICK = "clock_tick"
    FINISH = "finish"


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _make_envelope(
    length: int,
    attack: int = 200,
    decay: int = 400,
    sustain_level: float = 0.7,
    release: int = 800,
) -> np.ndarray:
    """ADSR envelope (all durations in samples)."""
    env = np.full(length, sustain_level, dtype=np.float64)
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    d_end = min(a + decay, length)
    if d_end > a:
        env[a:d_end] = np.linspace(1.0, sustain_level, d_end - a)
    r_start = max(length - release, d_end)
    if r_start < length:
        env[r_start:] = np.linspace(env[r_start - 1] if r_start else 1.0, 0.0, length - r_start)
    return env


def _sine(freq: float, duration_s: float) -> np.ndarray:
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _silence(duration_s: float) -> np.ndarray:
    return np.zeros(int(SAMPLE_RATE * duration_s))


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Float samples in -1..1 → mono 16-bit PCM WAV."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  ALERT GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_start() -> bytes:
    """Rising chime, D5 → F#5 → A5."""
    parts: list[np.ndarray] = []
    for freq in (587.33, 739.99, 880.00):
        tone = _sine(freq, 0.11) * 0.55
        parts.append(tone * _make_envelope(len(tone), 90, 180, 0.4, 280))
        parts.append(_silence(0.025))
    parts.append(_silence(0.05))
    return _to_wav_bytes(np.concatenate(parts))


def _generate_tick() -> bytes:
    """Wooden click: a 2 kHz blip over a damped 900 Hz body."""
    blip = _sine(2000.0, 0.008) * 0.25
    body = _sine(900.0, 0.03) * 0.2
    click = np.concatenate([blip, np.zeros(len(body) - len(blip))]) + body
    env = _make_envelope(len(click), attack=10, decay=60, sustain_level=0.15, release=len(click) - 70)
    # Padding keeps QSoundEffect from clipping the tail.
    return _to_wav_bytes(np.concatenate([click * env, _silence(0.03)]))


def _generate_finish() -> bytes:
    """Arpeggio C5 → E5 → G5 → C6, top note held with an octave overtone."""
    notes = (523.25, 659.25, 783.99, 1046.50)
    parts: list[np.ndarray] = []
    for freq in notes[:-1]:
        tone = _sine(freq, 0.10) * 0.5
        parts.append(tone * _make_envelope(len(tone), 60, 150, 0.3, 200))
        parts.append(_silence(0.02))
    top = _sine(notes[-1], 0.45) * 0.5 + _sine(notes[-1] * 2, 0.45) * 0.08
    parts.append(top * _make_envelope(len(top), 80, 300, 0.5, 700))
    return _to_wav_bytes(np.concatenate(parts))


_GENERATORS = {
    AlertKind.START: _generate_start,
    AlertKind.TICK: _generate_tick,
    AlertKind.FINISH: _generate_finish,
}


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Alert sink: synthesis, caching and playback.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.set_volume(70)
        mgr.play(AlertKind.FINISH, with_vibration=True)
    """

    vibration_requested = pyqtSignal()

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._vibration_enabled = True
        self._volume = 0.7  # 0.0–1.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[AlertKind, QSoundEffect] = {}

        self._ensure_wav_files()
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def set_vibration_enabled(self, enabled: bool) -> None:
        self._vibration_enabled = enabled

    def play(self, kind: AlertKind, with_vibration: bool = False) -> None:
        """Play the sound for *kind*; optionally ask the host to vibrate."""
        if with_vibration and self._vibration_enabled:
            self.vibration_requested.emit()
        if not self._enabled:
            return
        effect = self._effects.get(kind)
        if effect is not None:
            effect.play()

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def vibration_enabled(self) -> bool:
        return self._vibration_enabled

    # ── internal ──────────────────────────────────────────────────────

    def _path_for(self, kind: AlertKind) -> Path:
        return self._sounds_dir / f"{kind.value}.wav"

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for kind, gen_fn in _GENERATORS.items():
            path = self._path_for(kind)
            if not path.exists():
                path.write_bytes(gen_fn())

    def _load_effects(self) -> None:
        for kind in AlertKind:
            path = self._path_for(kind)
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(self._volume)
                self._effects[kind] = effect
