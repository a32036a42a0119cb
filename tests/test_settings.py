"""Tests for settings persistence and the preference store.

Covers:
- Settings dataclass defaults and JSON round-trip
- Fallback to defaults for unreadable or invalid files
- Settings ↔ SessionConfig conversion
- PreferenceStore get/set and the theme helpers
"""

from __future__ import annotations

import json

import pytest

from pomoclock import settings as settings_mod
from pomoclock.settings import Settings, load_settings, save_settings
from pomoclock.timer.engine import SessionConfig, InvalidConfig
from pomoclock.database.db import get_session
from pomoclock.database.models import Preference
from pomoclock.database.store import (
    PreferenceStore, load_theme, save_theme, THEME_KEY,
)


# ═══════════════════════════════════════════════════════════════════════
#  SETTINGS
# ═══════════════════════════════════════════════════════════════════════


class TestSettingsDefaults:
    def test_timer_defaults(self):
        s = Settings()
        assert s.work_duration == 25 * 60
        assert s.break_duration == 5 * 60
        assert s.long_break_duration == 15 * 60
        assert s.cycle_threshold == 10

    def test_audio_defaults(self):
        s = Settings()
        assert s.sound_enabled is True
        assert s.sound_volume == 70

    def test_notifications_default(self):
        assert Settings().notifications_enabled is True


class TestSettingsPersistence:
    def test_missing_file_gives_defaults(self):
        assert load_settings() == Settings()

    def test_round_trip(self):
        original = Settings(
            work_duration=50 * 60, break_duration=600,
            long_break_duration=1800, cycle_threshold=3,
            sound_enabled=False, sound_volume=20,
            notifications_enabled=False,
        )
        save_settings(original)
        assert load_settings() == original

    def test_file_is_pretty_json(self):
        save_settings(Settings())
        text = settings_mod.SETTINGS_PATH.read_text(encoding="utf-8")
        assert text.endswith("\n")
        assert json.loads(text)["cycle_threshold"] == 10

    def test_unknown_keys_ignored(self):
        settings_mod.SETTINGS_PATH.write_text(
            json.dumps({"work_duration": 600, "clock_style": "analog"}),
            encoding="utf-8",
        )
        loaded = load_settings()
        assert loaded.work_duration == 600
        assert not hasattr(loaded, "clock_style")

    def test_corrupt_file_falls_back(self):
        settings_mod.SETTINGS_PATH.write_text("{not json", encoding="utf-8")
        assert load_settings() == Settings()

    @pytest.mark.parametrize("payload", [
        {"work_duration": 0},
        {"cycle_threshold": 0},
        {"break_duration": -60},
        {"long_break_duration": "soon"},
    ])
    def test_invalid_timer_values_fall_back(self, payload):
        settings_mod.SETTINGS_PATH.write_text(
            json.dumps(payload), encoding="utf-8",
        )
        assert load_settings() == Settings()

    @pytest.mark.parametrize("payload", [
        {"sound_enabled": "false"},
        {"notifications_enabled": 0},
        {"sound_enabled": None, "work_duration": 600},
    ])
    def test_non_boolean_switches_fall_back(self, payload):
        settings_mod.SETTINGS_PATH.write_text(
            json.dumps(payload), encoding="utf-8",
        )
        assert load_settings() == Settings()

    def test_boolean_switches_load(self):
        settings_mod.SETTINGS_PATH.write_text(
            json.dumps({"sound_enabled": False,
                        "notifications_enabled": False}),
            encoding="utf-8",
        )
        loaded = load_settings()
        assert loaded.sound_enabled is False
        assert loaded.notifications_enabled is False

    def test_volume_clamped(self):
        settings_mod.SETTINGS_PATH.write_text(
            json.dumps({"sound_volume": 250}), encoding="utf-8",
        )
        assert load_settings().sound_volume == 100


class TestSettingsConfig:
    def test_session_config(self):
        s = Settings(work_duration=60, break_duration=30,
                     long_break_duration=90, cycle_threshold=2)
        assert s.session_config() == SessionConfig(60, 30, 90, 2)

    def test_session_config_validates(self):
        with pytest.raises(InvalidConfig):
            Settings(cycle_threshold=0).session_config()

    def test_update_from_config(self):
        s = Settings()
        s.update_from_config(SessionConfig(600, 120, 1200, 5))
        assert (s.work_duration, s.break_duration,
                s.long_break_duration, s.cycle_threshold) == (600, 120, 1200, 5)
        assert s.sound_volume == 70

    def test_update_rejects_invalid(self):
        s = Settings()
        with pytest.raises(InvalidConfig):
            s.update_from_config(SessionConfig(work_duration=0))
        assert s.work_duration == 25 * 60


# ═══════════════════════════════════════════════════════════════════════
#  PREFERENCE STORE
# ═══════════════════════════════════════════════════════════════════════


class TestPreferenceStore:
    def test_get_missing_returns_default(self):
        store = PreferenceStore()
        assert store.get("missing") is None
        assert store.get("missing", "x") == "x"

    def test_set_then_get(self):
        store = PreferenceStore()
        store.set("theme", "dark")
        assert store.get("theme") == "dark"

    def test_set_overwrites(self):
        store = PreferenceStore()
        store.set("theme", "dark")
        store.set("theme", "light")
        assert store.get("theme") == "light"
        with get_session() as db:
            assert db.query(Preference).count() == 1

    def test_shared_across_instances(self):
        PreferenceStore().set("theme", "dark")
        assert PreferenceStore().get("theme") == "dark"

    def test_delete(self):
        store = PreferenceStore()
        store.set("theme", "dark")
        store.delete("theme")
        assert store.get("theme") is None
        store.delete("theme")  # deleting twice is fine


class TestTheme:
    def test_default_is_light(self):
        assert load_theme(PreferenceStore()) == "light"

    def test_dark_round_trip(self):
        store = PreferenceStore()
        save_theme(store, "dark")
        assert load_theme(store) == "dark"
        assert store.get(THEME_KEY) == "dark"

    def test_unexpected_value_reads_as_light(self):
        store = PreferenceStore()
        store.set(THEME_KEY, "sepia")
        assert load_theme(store) == "light"

    def test_save_rejects_unknown_theme(self):
        with pytest.raises(ValueError):
            save_theme(PreferenceStore(), "sepia")
