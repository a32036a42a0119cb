"""QSS stylesheets, light/dark palettes, and mode colors for PomoClock."""

from __future__ import annotations

from ..timer.engine import Mode

# ── mode colors (progress bar chunk) ─────────────────────────────────────

MODE_COLORS: dict[Mode, str] = {
    Mode.WORK:  "#FF6B6B",   # warm coral
    Mode.BREAK: "#4ECDC4",   # cool teal
}

LONG_BREAK_COLOR = "#A18CD1"  # calm purple

# ── palettes ─────────────────────────────────────────────────────────────

PALETTES: dict[str, dict[str, str]] = {
    "light": {
        "bg":           "#F5F5F7",
        "bg_secondary": "#FFFFFF",
        "surface":      "#EBEBF0",
        "accent":       "#7C5CD6",
        "accent2":      "#5B8DEF",
        "text":         "#1D1D1F",
        "text_muted":   "#6E6E73",
        "border":       "#D2D2D7",
    },
    "dark": {
        "bg":           "#1A1A2E",
        "bg_secondary": "#232340",
        "surface":      "#2A2A4A",
        "accent":       "#CBA6F7",
        "accent2":      "#89B4FA",
        "text":         "#E2E2F0",
        "text_muted":   "#7A7A9A",
        "border":       "#313154",
    },
}


def get_palette(theme: str) -> dict[str, str]:
    """Palette for *theme*; unknown names get the light palette."""
    return dict(PALETTES.get(theme, PALETTES["light"]))


def toggled_theme(theme: str) -> str:
    return "light" if theme == "dark" else "dark"


def theme_button_glyph(theme: str) -> str:
    """Moon while light (click for dark), sun while dark."""
    return "\U0001F319" if theme == "light" else "☀️"


_resolved_font: str | None = None


def resolve_font_family() -> str:
    """Detect the best available system font.  Must be called after
    QApplication is created (font database needs the app context)."""
    global _resolved_font
    if _resolved_font is None:
        try:
            from PyQt6.QtGui import QFontDatabase
            families = set(QFontDatabase.families())
            for candidate in ("SF Pro", ".AppleSystemUIFont", "Segoe UI"):
                if candidate in families:
                    _resolved_font = candidate
                    break
            else:
                _resolved_font = "Helvetica Neue"
        except Exception:
            _resolved_font = "Helvetica Neue"
    return _resolved_font


# ── QSS builder ───────────────────────────────────────────────────────


def build_stylesheet(palette: dict[str, str], chunk_color: str) -> str:
    p = palette
    font = resolve_font_family()
    return f"""
    /* ── global ─────────────────────────────────── */
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-family: "{font}", "Helvetica Neue", Arial;
        font-size: 14px;
    }}

    QMainWindow {{
        background-color: {p['bg']};
    }}

    /* ── buttons ─────────────────────────────────── */
    QPushButton {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 10px;
        padding: 10px 24px;
        font-size: 14px;
        font-weight: 600;
    }}

    QPushButton:hover {{
        background-color: {p['surface']};
        border-color: {p['accent']};
    }}

    QPushButton:pressed {{
        background-color: {p['accent']};
        color: {p['bg']};
    }}

    QPushButton#primaryButton {{
        background-color: {p['accent']};
        color: {p['bg']};
        border: none;
        font-size: 17px;
        padding: 14px 40px;
        border-radius: 12px;
        font-weight: 700;
    }}

    QPushButton#primaryButton:hover {{
        background-color: {p['accent2']};
    }}

    QPushButton#secondaryButton {{
        background-color: transparent;
        color: {p['text_muted']};
        border: 1px solid {p['border']};
        font-size: 13px;
        padding: 8px 16px;
        border-radius: 8px;
    }}

    QPushButton#secondaryButton:hover {{
        color: {p['text']};
        border-color: {p['text_muted']};
    }}

    /* ── spin boxes (duration form) ──────────────── */
    QSpinBox {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 8px;
        padding: 6px 10px;
        font-size: 13px;
    }}

    QSpinBox:focus {{
        border-color: {p['accent']};
    }}

    /* ── frame / card ────────────────────────────── */
    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 12px;
    }}

    /* ── progress bar (interval progress) ────────── */
    QProgressBar {{
        background-color: {p['surface']};
        border: none;
        border-radius: 5px;
        max-height: 10px;
        text-align: center;
    }}

    QProgressBar::chunk {{
        background-color: {chunk_color};
        border-radius: 5px;
    }}

    /* ── labels ──────────────────────────────────── */
    QLabel#modeLabel {{
        font-size: 20px;
        font-weight: 700;
        color: {p['accent']};
    }}

    QLabel#timerLabel {{
        font-size: 64px;
        font-weight: 300;
    }}

    QLabel#mutedLabel {{
        font-size: 12px;
        color: {p['text_muted']};
    }}

    /* ── status bar ──────────────────────────────── */
    QStatusBar {{
        background-color: {p['bg']};
        color: {p['text_muted']};
        font-size: 12px;
        border-top: 1px solid {p['border']};
    }}
    """
