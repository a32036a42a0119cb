"""Audio package."""

from .sounds import SoundPlayer, SOUND_NAMES

__all__ = ["SoundPlayer", "SOUND_NAMES"]
