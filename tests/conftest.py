"""Shared pytest fixtures for PomoClock tests."""

import os
import sys
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from pomoclock.database.db import configure_engine, init_db
from pomoclock.timer.engine import SessionEngine, SessionConfig


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture(autouse=True)
def app_support_dir(tmp_path, monkeypatch):
    """Keep settings and cached sounds out of the real home directory."""
    monkeypatch.setattr("pomoclock.settings.APP_SUPPORT_DIR", tmp_path)
    monkeypatch.setattr(
        "pomoclock.settings.SETTINGS_PATH", tmp_path / "settings.json",
    )
    monkeypatch.setattr("pomoclock.audio.sounds.SOUNDS_DIR", tmp_path / "sounds")
    yield tmp_path


@pytest.fixture
def classic_config():
    """The textbook 25/5/15 schedule with a long break every 4 cycles."""
    return SessionConfig(
        work_duration=1500,
        break_duration=300,
        long_break_duration=900,
        cycle_threshold=4,
    )


@pytest.fixture
def engine(qapp):
    """Fresh SessionEngine with the default config."""
    return SessionEngine()


@pytest.fixture
def classic_engine(qapp, classic_config):
    return SessionEngine(classic_config)


@pytest.fixture
def short_engine(qapp):
    """Tiny durations so intervals can be ticked through completely."""
    return SessionEngine(SessionConfig(
        work_duration=5,
        break_duration=2,
        long_break_duration=3,
        cycle_threshold=2,
    ))
