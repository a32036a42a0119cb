"""Tests for the main window and the duration form.

Covers:
- DurationForm population, validation, and Apply
- PomodoroWindow wiring: display refresh, start/pause/reset buttons,
  config apply + save, theme toggle + persistence, keyboard shortcuts,
  and engine requests reaching the collaborators
"""

from __future__ import annotations

import pytest
from PyQt6.QtCore import Qt, QEvent
from PyQt6.QtGui import QKeyEvent

from pomoclock.app import PomodoroWindow, MODE_TITLES
from pomoclock.database.store import PreferenceStore, load_theme, save_theme
from pomoclock.settings import Settings, load_settings
from pomoclock.timer.engine import (
    SessionConfig, Mode, WORK_END_MESSAGE, WORK_END_SOUND,
)
from pomoclock.ui.duration_form import DurationForm

from helpers import SignalCollector, fast_complete


class _RecordingPlayer:
    """Stands in for SoundPlayer so no audio device is touched."""

    def __init__(self):
        self.played: list[str] = []
        self.volume = None
        self.enabled = None

    def set_volume(self, level):
        self.volume = level

    def set_enabled(self, enabled):
        self.enabled = enabled

    def play(self, name):
        self.played.append(name)
        return True


@pytest.fixture
def player():
    return _RecordingPlayer()


@pytest.fixture
def window(qapp, player):
    settings = Settings(work_duration=120, break_duration=60,
                        long_break_duration=180, cycle_threshold=2)
    w = PomodoroWindow(settings=settings, store=PreferenceStore(),
                       sound_player=player)
    yield w
    w.close()


def _press(widget, key):
    event = QKeyEvent(QEvent.Type.KeyPress, key,
                      Qt.KeyboardModifier.NoModifier)
    widget.keyPressEvent(event)


# ═══════════════════════════════════════════════════════════════════════
#  DURATION FORM
# ═══════════════════════════════════════════════════════════════════════


class TestDurationForm:
    def test_populates_minutes(self, qapp):
        form = DurationForm(SessionConfig(1500, 300, 900, 4))
        assert form._work_spin.value() == 25
        assert form._break_spin.value() == 5
        assert form._cycles_spin.value() == 4
        assert form._long_spin.value() == 15

    def test_fractional_minutes_shown(self, qapp):
        form = DurationForm(SessionConfig(90, 30, 45, 4))
        assert form._work_spin.value() == 1.5
        assert form._break_spin.value() == 0.5
        assert form._long_spin.value() == 0.75

    @pytest.mark.parametrize("config", [
        SessionConfig(90, 30, 45, 4),
        SessionConfig(18000, 300, 900, 4),
        SessionConfig(1, 20, 61, 1),
        SessionConfig(100_000, 300, 900, 150),
    ])
    def test_config_survives_form(self, qapp, config):
        assert DurationForm(config).config() == config

    def test_spin_boxes_never_reach_zero(self, qapp):
        form = DurationForm(SessionConfig())
        form._work_spin.setValue(0)
        form._cycles_spin.setValue(-3)
        assert form._work_spin.value() == 0.01
        assert form._cycles_spin.value() == 1
        assert form.config().work_duration == 1

    def test_config_in_seconds(self, qapp):
        form = DurationForm(SessionConfig())
        form._work_spin.setValue(50)
        form._break_spin.setValue(10)
        form._cycles_spin.setValue(3)
        form._long_spin.setValue(30)
        assert form.config() == SessionConfig(3000, 600, 1800, 3)

    def test_apply_emits_config(self, qapp):
        form = DurationForm(SessionConfig())
        c = SignalCollector()
        form.applied.connect(c)
        form._apply_btn.click()
        assert c.last == SessionConfig()


# ═══════════════════════════════════════════════════════════════════════
#  WINDOW
# ═══════════════════════════════════════════════════════════════════════


class TestWindowDisplay:
    def test_initial_display(self, window):
        assert window._mode_label.text() == MODE_TITLES[Mode.WORK]
        assert window._timer_label.text() == "02:00"
        assert window._progress.value() == 0
        assert window._toggle_btn.text() == "Start"
        assert "Cycles: 0" in window._cycles_label.text()

    def test_engine_uses_settings(self, window):
        assert window.engine.config == SessionConfig(120, 60, 180, 2)
        assert window._duration_form._work_spin.value() == 2

    def test_player_configured_from_settings(self, window, player):
        assert player.volume == 70
        assert player.enabled is True

    def test_wall_clock_runs_separately(self, window):
        assert window._clock_timer.isActive()
        assert window._clock_label.text() != ""
        assert window.engine.is_subscribed is False

    def test_tick_refreshes_display(self, window):
        window._toggle_btn.click()
        assert window._toggle_btn.text() == "Pause"
        for _ in range(60):
            window.engine.tick()
        assert window._timer_label.text() == "01:00"
        assert window._progress.value() == 500

    def test_completion_updates_display(self, window):
        fast_complete(window.engine)
        assert window._mode_label.text() == MODE_TITLES[Mode.BREAK]
        assert window._timer_label.text() == "01:00"
        assert window._toggle_btn.text() == "Start"
        assert "Cycles: 1" in window._cycles_label.text()

    def test_reset_button(self, window):
        fast_complete(window.engine)
        window._reset_btn.click()
        assert window.engine.mode == Mode.WORK
        assert window.engine.cycles_completed == 0
        assert window._timer_label.text() == "02:00"


class TestWindowCollaborators:
    def test_completion_plays_sound(self, window, player):
        fast_complete(window.engine)
        assert player.played == [WORK_END_SOUND]

    def test_completion_reaches_notifier(self, window):
        class _Tray:
            def __init__(self):
                self.messages: list[str] = []

            def showMessage(self, title, body):
                self.messages.append(body)

        tray = _Tray()
        window.notifier._tray = tray
        window.notifier._probe = lambda: True
        fast_complete(window.engine)
        assert tray.messages == [WORK_END_MESSAGE]

    def test_denied_notifications_do_not_block(self, window):
        fast_complete(window.engine)
        fast_complete(window.engine)
        assert window.engine.mode == Mode.WORK
        assert window.engine.cycles_completed == 1


class TestWindowConfig:
    def test_apply_updates_engine_and_saves(self, window):
        fast_complete(window.engine)
        window._duration_form._break_spin.setValue(7)
        window._duration_form._apply_btn.click()
        assert window.engine.mode == Mode.BREAK
        assert window.engine.seconds_left == 420
        assert window.engine.cycles_completed == 0
        assert window._timer_label.text() == "07:00"
        assert load_settings().break_duration == 420


class TestWindowTheme:
    def test_default_theme_light(self, window):
        assert window.theme == "light"

    def test_toggle_persists(self, window):
        window._theme_btn.click()
        assert window.theme == "dark"
        assert load_theme(PreferenceStore()) == "dark"
        window._theme_btn.click()
        assert load_theme(PreferenceStore()) == "light"

    def test_restores_saved_theme(self, qapp, player):
        store = PreferenceStore()
        save_theme(store, "dark")
        w = PomodoroWindow(settings=Settings(), store=store,
                           sound_player=player)
        assert w.theme == "dark"
        w.close()


class TestWindowKeys:
    def test_space_toggles(self, window):
        _press(window, Qt.Key.Key_Space)
        assert window.engine.is_running is True
        _press(window, Qt.Key.Key_Space)
        assert window.engine.is_running is False

    def test_escape_resets(self, window):
        window.engine.start()
        window.engine.tick()
        _press(window, Qt.Key.Key_Escape)
        assert window.engine.is_running is False
        assert window.engine.seconds_left == 120

    def test_close_pauses(self, qapp, player):
        w = PomodoroWindow(settings=Settings(), store=PreferenceStore(),
                           sound_player=player)
        w.show()
        w.engine.start()
        w.close()
        assert w.engine.is_running is False
