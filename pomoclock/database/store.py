"""Key-value preference store backed by the ``preferences`` table.

The theme is the only preference the UI keeps here; timer durations live
in ``settings.json``.
"""

from __future__ import annotations

from .db import get_session
from .models import Preference

THEME_KEY = "theme"
THEMES = ("light", "dark")


class PreferenceStore:
    """Persist string preferences across restarts.

    Usage::

        store = PreferenceStore()
        store.set("theme", "dark")
        store.get("theme")          # "dark"
    """

    def get(self, key: str, default: str | None = None) -> str | None:
        with get_session() as db:
            record = db.get(Preference, key)
            if record is None or record.value is None:
                return default
            return record.value

    def set(self, key: str, value: str) -> None:
        with get_session() as db:
            record = db.get(Preference, key)
            if record is None:
                db.add(Preference(key=key, value=value))
            else:
                record.value = value

    def delete(self, key: str) -> None:
        with get_session() as db:
            record = db.get(Preference, key)
            if record is not None:
                db.delete(record)


def load_theme(store: PreferenceStore) -> str:
    """``"dark"`` only if that is what was stored; anything else is light."""
    return "dark" if store.get(THEME_KEY) == "dark" else "light"


def save_theme(store: PreferenceStore, theme: str) -> None:
    if theme not in THEMES:
        raise ValueError(f"Unknown theme {theme!r}; expected one of {THEMES}")
    store.set(THEME_KEY, theme)
