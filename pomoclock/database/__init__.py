"""Database package."""

from .db import get_session, init_db
from .models import Preference
from .store import PreferenceStore, load_theme, save_theme

__all__ = [
    "get_session",
    "init_db",
    "Preference",
    "PreferenceStore",
    "load_theme",
    "save_theme",
]
