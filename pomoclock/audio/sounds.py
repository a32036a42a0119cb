"""Alarm synthesis and playback using numpy + QSoundEffect.

Both alarms are generated as WAV files from sine waves shaped by an ADSR
envelope, then cached on disk so later launches skip the synthesis.

Sound names
-----------
- ``alarm-work-end``:  two rounds of a descending bell, "step away"
- ``alarm-break-end``: two rounds of a bright ascending chime, "back to it"
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..settings import APP_SUPPORT_DIR
from ..timer.engine import WORK_END_SOUND, BREAK_END_SOUND

logger = logging.getLogger(__name__)


# ── paths ────────────────────────────────────────────────────────────────

SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SOUND_NAMES = (
    WORK_END_SOUND,
    BREAK_END_SOUND,
)

SAMPLE_RATE = 44100


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
    env = np.ones(length, dtype=np.float64)
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    d_end = min(a + decay, length)
    if decay > 0 and d_end > a:
        env[a:d_end] = np.linspace(1.0, sustain_level, d_end - a)
    s_end = max(length - release, d_end)
    if s_end > d_end:
        env[d_end:s_end] = sustain_level
    if release > 0 and s_end < length:
        env[s_end:] = np.linspace(sustain_level, 0.0, length - s_end)
    return env


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _silence(duration_s: float) -> np.ndarray:
    return np.zeros(int(SAMPLE_RATE * duration_s))


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


def _phrase(
    notes: list[float],
    note_dur: float,
    gap: float,
    *,
    amplitude: float,
    overtone: float = 0.0,
) -> np.ndarray:
    """Play *notes* in order; the last one rings out three times longer."""
    parts: list[np.ndarray] = []
    for i, freq in enumerate(notes):
        last = i == len(notes) - 1
        dur = note_dur * 3 if last else note_dur
        tone = _sine(freq, dur) * amplitude
        if overtone:
            tone = tone + _sine(freq * 2, dur) * overtone
        env = _make_envelope(
            len(tone),
            attack=int(SAMPLE_RATE * 0.01),
            decay=int(SAMPLE_RATE * dur * 0.3),
            sustain_level=0.45,
            release=int(SAMPLE_RATE * dur * (0.6 if last else 0.3)),
        )
        parts.append(tone * env)
        if not last:
            parts.append(_silence(gap))
    return np.concatenate(parts)


# ═══════════════════════════════════════════════════════════════════════════
#  ALARM GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_work_end() -> bytes:
    """Work over: descending bell (G5→E5→C5), rung twice."""
    phrase = _phrase([783.99, 659.25, 523.25], 0.18, 0.04,
                     amplitude=0.45, overtone=0.1)
    return _to_wav_bytes(np.concatenate(
        [phrase, _silence(0.25), phrase, _silence(0.1)],
    ))


def _generate_break_end() -> bytes:
    """Break over: bright ascending chime (C5→E5→G5→C6), rung twice."""
    phrase = _phrase([523.25, 659.25, 783.99, 1046.50], 0.12, 0.03,
                     amplitude=0.5)
    return _to_wav_bytes(np.concatenate(
        [phrase, _silence(0.2), phrase, _silence(0.1)],
    ))


_GENERATORS: dict[str, callable] = {
    WORK_END_SOUND: _generate_work_end,
    BREAK_END_SOUND: _generate_break_end,
}


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND PLAYER
# ═══════════════════════════════════════════════════════════════════════════


class SoundPlayer(QObject):
    """Plays named alerts.  Fire-and-forget: failures are logged only.

    Usage::

        player = SoundPlayer(parent=self)
        player.set_volume(70)
        engine.sound_requested.connect(player.play)
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.7  # 0.0–1.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}

        try:
            self._ensure_wav_files()
        except OSError as exc:
            logger.warning("Could not write alarm sounds to %s: %s",
                           self._sounds_dir, exc)
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def play(self, name: str) -> bool:
        """Play an alert by name.  Returns whether playback was attempted."""
        if not self._enabled:
            return False
        effect = self._effects.get(name)
        if effect is None:
            logger.warning("Unknown sound %r", name)
            return False
        try:
            effect.play()
        except Exception:
            logger.warning("Playing %r failed", name, exc_info=True)
            return False
        return True

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def loaded(self) -> tuple[str, ...]:
        """Names of the alerts that are ready to play."""
        return tuple(self._effects)

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for name, gen_fn in _GENERATORS.items():
            path = self._sounds_dir / f"{name}.wav"
            if not path.exists():
                path.write_bytes(gen_fn())

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for name in SOUND_NAMES:
            path = self._sounds_dir / f"{name}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(self._volume)
                self._effects[name] = effect
