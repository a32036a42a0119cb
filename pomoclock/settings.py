"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/PomoClock/settings.json

Usage::

    settings = load_settings()
    settings.update_from_config(engine.config)
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

from .timer.engine import (
    SessionConfig,
    InvalidConfig,
    DEFAULT_WORK,
    DEFAULT_BREAK,
    DEFAULT_LONG_BREAK,
    CYCLE_THRESHOLD,
)

logger = logging.getLogger(__name__)

# Shared with database/db.py and audio/sounds.py
APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "PomoClock"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences except the theme."""

    # ── timer ─────────────────────────────────────────────────────────
    work_duration: int = DEFAULT_WORK              # seconds
    break_duration: int = DEFAULT_BREAK
    long_break_duration: int = DEFAULT_LONG_BREAK
    cycle_threshold: int = CYCLE_THRESHOLD

    # ── audio ─────────────────────────────────────────────────────────
    sound_enabled: bool = True
    sound_volume: int = 70                         # 0-100

    # ── notifications ─────────────────────────────────────────────────
    notifications_enabled: bool = True

    def session_config(self) -> SessionConfig:
        """The timer part of the settings, validated."""
        return SessionConfig(
            work_duration=self.work_duration,
            break_duration=self.break_duration,
            long_break_duration=self.long_break_duration,
            cycle_threshold=self.cycle_threshold,
        ).validate()

    def update_from_config(self, config: SessionConfig) -> None:
        config.validate()
        self.work_duration = config.work_duration
        self.break_duration = config.break_duration
        self.long_break_duration = config.long_break_duration
        self.cycle_threshold = config.cycle_threshold


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults.

    A file whose timer values would be rejected by the engine, or whose
    switches are not booleans, is discarded as a whole.
    """
    if not SETTINGS_PATH.exists():
        return Settings()
    try:
        data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
        # Only use keys that exist in the dataclass
        valid_keys = {f.name for f in fields(Settings)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        settings = Settings(**filtered)
        settings.session_config()
        for name in ("sound_enabled", "notifications_enabled"):
            if not isinstance(getattr(settings, name), bool):
                raise TypeError(f"{name} must be true or false")
        settings.sound_volume = max(0, min(int(settings.sound_volume), 100))
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        # InvalidConfig and JSONDecodeError are both ValueErrors
        logger.warning("Ignoring unreadable settings at %s: %s",
                       SETTINGS_PATH, exc)
        return Settings()
    return settings


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )


__all__ = [
    "Settings",
    "InvalidConfig",
    "load_settings",
    "save_settings",
    "APP_SUPPORT_DIR",
    "SETTINGS_PATH",
]
