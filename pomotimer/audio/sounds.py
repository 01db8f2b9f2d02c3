"""Completion chime synthesis and playback using numpy + QSoundEffect.

The chime is two sine tones (C5 then E5, 150 ms apart), each with a
fast linear attack and an exponential decay.  It is generated once as a
WAV file and cached to disk.

Audio is strictly best-effort: if the cache cannot be written or the
effect cannot load, ``play`` simply does nothing.
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

logger = logging.getLogger(__name__)


# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "PomoTimer"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"
CHIME_NAME = "session_complete"

SAMPLE_RATE = 44100

CHIME_FREQUENCIES = (523.25, 659.25)  # C5, E5
CHIME_SPACING = 0.15   # seconds between note onsets
NOTE_ATTACK = 0.05
NOTE_LENGTH = 0.8
PEAK_GAIN = 0.3
FLOOR_GAIN = 0.01


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════════


def _note_envelope(n_samples: int) -> np.ndarray:
    """Linear ramp to PEAK_GAIN, then exponential fall to FLOOR_GAIN."""
    t = np.arange(n_samples) / SAMPLE_RATE
    env = np.empty(n_samples, dtype=np.float64)
    attack = t < NOTE_ATTACK
    env[attack] = PEAK_GAIN * t[attack] / NOTE_ATTACK
    decay_t = (t[~attack] - NOTE_ATTACK) / (NOTE_LENGTH - NOTE_ATTACK)
    env[~attack] = PEAK_GAIN * (FLOOR_GAIN / PEAK_GAIN) ** decay_t
    return env


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.arange(int(SAMPLE_RATE * duration_s)) / SAMPLE_RATE
    return np.sin(2 * np.pi * freq * t)


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


def generate_chime() -> bytes:
    """Two overlapping notes, mixed into one mono buffer."""
    note_samples = int(SAMPLE_RATE * NOTE_LENGTH)
    offset = int(SAMPLE_RATE * CHIME_SPACING)
    total = offset * (len(CHIME_FREQUENCIES) - 1) + note_samples
    mix = np.zeros(total, dtype=np.float64)
    env = _note_envelope(note_samples)
    for i, freq in enumerate(CHIME_FREQUENCIES):
        start = i * offset
        mix[start:start + note_samples] += _sine(freq, NOTE_LENGTH)[:note_samples] * env
    return _to_wav_bytes(mix)


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Caches and plays the completion chime.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.play()
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effect: QSoundEffect | None = None

        path = self._ensure_wav_file()
        if path is not None:
            self._effect = QSoundEffect(self)
            self._effect.setSource(QUrl.fromLocalFile(str(path)))

    # ── public API ────────────────────────────────────────────────────

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    @property
    def available(self) -> bool:
        return self._effect is not None

    def play(self) -> None:
        """Play the chime.  No-op if disabled or unavailable."""
        if not self._enabled or self._effect is None:
            return
        self._effect.play()

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_file(self) -> Path | None:
        path = self._sounds_dir / f"{CHIME_NAME}.wav"
        try:
            self._sounds_dir.mkdir(parents=True, exist_ok=True)
            if not path.exists():
                path.write_bytes(generate_chime())
        except OSError:
            logger.warning("Sound cache unavailable, chime disabled", exc_info=True)
            return None
        return path
