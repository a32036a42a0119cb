"""Main application window for PomoClock."""

from __future__ import annotations

import logging
from datetime import datetime

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QAction, QIcon, QImage, QPainter, QColor, QPixmap, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QStatusBar, QProgressBar, QFrame, QPushButton,
    QSystemTrayIcon, QMenu,
)

from .timer.engine import SessionEngine, SessionConfig, Mode, InvalidConfig
from .ui.duration_form import DurationForm
from .ui.styles import (
    build_stylesheet, get_palette, toggled_theme, theme_button_glyph,
    MODE_COLORS, LONG_BREAK_COLOR,
)
from .database.store import PreferenceStore, load_theme, save_theme
from .settings import Settings, load_settings, save_settings
from .notifications import Notifier
from .audio.sounds import SoundPlayer

logger = logging.getLogger(__name__)

MODE_TITLES: dict[Mode, str] = {
    Mode.WORK:  "Work Time",
    Mode.BREAK: "Break Time",
}

WALL_CLOCK_INTERVAL_MS = 1000


# ── tray‑icon image generation ────────────────────────────────────────────


def _make_tray_icon(mode: Mode, running: bool) -> QIcon:
    """32×32 template icon: filled while working, ring with dot on break,
    plain ring while paused."""
    size = 64  # draw at 2× for Retina
    img = QImage(size, size, QImage.Format.Format_ARGB32_Premultiplied)
    img.fill(Qt.GlobalColor.transparent)
    p = QPainter(img)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    colour = QColor(0, 0, 0, 220)
    cx, cy, r = size // 2, size // 2, size // 2 - 4

    if running and mode == Mode.WORK:
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(colour)
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
    else:
        from PyQt6.QtGui import QPen
        p.setPen(QPen(colour, 4))
        p.setBrush(Qt.BrushStyle.NoBrush)
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
        if running:
            p.setPen(Qt.PenStyle.NoPen)
            p.setBrush(colour)
            dot_r = 6
            p.drawEllipse(cx - dot_r, cy - dot_r, dot_r * 2, dot_r * 2)

    p.end()
    img.setDevicePixelRatio(2.0)
    return QIcon(QPixmap.fromImage(img))


class PomodoroWindow(QMainWindow):
    """Main application window."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        store: PreferenceStore | None = None,
        sound_player: SoundPlayer | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Pomodoro Clock")
        self.setMinimumSize(480, 560)

        # ── settings + preferences ────────────────────────────────────
        self._settings: Settings = settings or load_settings()
        self._store = store or PreferenceStore()
        self._theme: str = load_theme(self._store)

        # ── engine ────────────────────────────────────────────────────
        self._engine = SessionEngine(self._settings.session_config(), self)

        # ── collaborators ─────────────────────────────────────────────
        self._sound_player = sound_player or SoundPlayer(parent=self)
        self._sound_player.set_volume(self._settings.sound_volume)
        self._sound_player.set_enabled(self._settings.sound_enabled)

        self._tray_icon = QSystemTrayIcon(self)
        self._tray_icon.setIcon(_make_tray_icon(Mode.WORK, False))
        self._tray_icon.setToolTip("Pomodoro Clock")
        self._build_tray_menu()
        self._tray_icon.show()
        self._notifier = Notifier(
            self._tray_icon, self,
            enabled=self._settings.notifications_enabled,
        )

        # ── central widget ────────────────────────────────────────────
        central = QWidget()
        self.setCentralWidget(central)
        root = QVBoxLayout(central)
        root.setContentsMargins(16, 12, 16, 12)
        root.setSpacing(12)

        root.addWidget(self._build_header(central))

        self._duration_form = DurationForm(self._engine.config, central)
        root.addWidget(self._duration_form)

        root.addWidget(self._build_timer_card(central), 1)

        self._cycles_label = QLabel("", central)
        self._cycles_label.setObjectName("mutedLabel")
        self._cycles_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self._cycles_label)

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage("Ready to focus!")

        # ── wall clock (independent of the countdown) ────────────────
        self._clock_timer = QTimer(self)
        self._clock_timer.setInterval(WALL_CLOCK_INTERVAL_MS)
        self._clock_timer.timeout.connect(self._refresh_clock)
        self._clock_timer.start()

        # ── wire signals ──────────────────────────────────────────────
        self._engine.ticked.connect(self._on_tick)
        self._engine.mode_changed.connect(self._on_mode_changed)
        self._engine.running_changed.connect(self._on_running_changed)
        self._engine.interval_completed.connect(self._on_interval_completed)
        self._engine.notify_requested.connect(self._notifier.notify)
        self._engine.sound_requested.connect(self._sound_player.play)
        self._duration_form.applied.connect(self._on_config_applied)
        self._duration_form.rejected.connect(self._status_bar.showMessage)

        self._setup_shortcuts()
        self._apply_theme()
        self._refresh_clock()
        self._refresh_timer()

    # ══════════════════════════════════════════════════════════════════
    #  BUILD
    # ══════════════════════════════════════════════════════════════════

    def _build_header(self, parent: QWidget) -> QWidget:
        bar = QFrame(parent)
        bar.setObjectName("card")
        row = QHBoxLayout(bar)
        row.setContentsMargins(16, 10, 16, 10)

        self._date_label = QLabel("", bar)
        self._date_label.setObjectName("mutedLabel")
        title = QLabel("Pomodoro Clock", bar)
        title.setStyleSheet("font-size: 17px; font-weight: 700;")
        self._clock_label = QLabel("", bar)

        self._theme_btn = QPushButton("", bar)
        self._theme_btn.setObjectName("secondaryButton")
        self._theme_btn.setToolTip("Toggle light/dark theme (Ctrl+T)")
        self._theme_btn.clicked.connect(self._toggle_theme)

        row.addWidget(self._date_label)
        row.addStretch()
        row.addWidget(title)
        row.addStretch()
        row.addWidget(self._clock_label)
        row.addWidget(self._theme_btn)
        return bar

    def _build_timer_card(self, parent: QWidget) -> QWidget:
        card = QFrame(parent)
        card.setObjectName("card")
        layout = QVBoxLayout(card)
        layout.setContentsMargins(24, 20, 24, 20)
        layout.setSpacing(14)

        self._mode_label = QLabel("", card)
        self._mode_label.setObjectName("modeLabel")
        self._mode_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._timer_label = QLabel("", card)
        self._timer_label.setObjectName("timerLabel")
        self._timer_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._progress = QProgressBar(card)
        self._progress.setRange(0, 1000)
        self._progress.setTextVisible(False)

        buttons = QHBoxLayout()
        buttons.addStretch()
        self._toggle_btn = QPushButton("Start", card)
        self._toggle_btn.setObjectName("primaryButton")
        self._toggle_btn.clicked.connect(self._engine.toggle_running)
        self._reset_btn = QPushButton("Reset", card)
        self._reset_btn.setObjectName("secondaryButton")
        self._reset_btn.clicked.connect(self._engine.reset)
        buttons.addWidget(self._toggle_btn)
        buttons.addWidget(self._reset_btn)
        buttons.addStretch()

        layout.addWidget(self._mode_label)
        layout.addWidget(self._timer_label)
        layout.addWidget(self._progress)
        layout.addLayout(buttons)
        return card

    def _build_tray_menu(self) -> None:
        menu = QMenu(self)
        self._tray_toggle_action = menu.addAction("Start")
        self._tray_toggle_action.triggered.connect(self._engine.toggle_running)
        reset_action = menu.addAction("Reset")
        reset_action.triggered.connect(self._engine.reset)
        menu.addSeparator()
        show_action = menu.addAction("Show Window")
        show_action.triggered.connect(self._show_window)
        self._tray_icon.setContextMenu(menu)

    def _setup_shortcuts(self) -> None:
        """Ctrl+T toggles the theme (Space/Esc handled via keyPressEvent)."""
        toggle_theme = QAction("Toggle Theme", self)
        toggle_theme.setShortcut(QKeySequence("Ctrl+T"))
        toggle_theme.triggered.connect(self._toggle_theme)
        self.addAction(toggle_theme)

    # ══════════════════════════════════════════════════════════════════
    #  REFRESH
    # ══════════════════════════════════════════════════════════════════

    def _refresh_clock(self) -> None:
        now = datetime.now()
        self._date_label.setText(now.strftime("%a %b %d %Y"))
        self._clock_label.setText(now.strftime("%H:%M:%S"))

    def _refresh_timer(self) -> None:
        engine = self._engine
        self._mode_label.setText(MODE_TITLES[engine.mode])
        self._timer_label.setText(engine.format_remaining())
        self._progress.setValue(round(engine.progress_percent() * 10))
        self._toggle_btn.setText("Pause" if engine.is_running else "Start")
        self._tray_toggle_action.setText(
            "Pause" if engine.is_running else "Start",
        )
        self._cycles_label.setText(f"✅ Cycles: {engine.cycles_completed}")
        self._tray_icon.setToolTip(
            f"Pomodoro Clock: {MODE_TITLES[engine.mode]} "
            f"{engine.format_remaining()}"
        )

    def _apply_theme(self) -> None:
        if self._engine.is_long_break:
            chunk = LONG_BREAK_COLOR
        else:
            chunk = MODE_COLORS[self._engine.mode]
        self.setStyleSheet(build_stylesheet(get_palette(self._theme), chunk))
        self._theme_btn.setText(theme_button_glyph(self._theme))

    # ══════════════════════════════════════════════════════════════════
    #  ENGINE SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self, _seconds_left: int) -> None:
        self._refresh_timer()

    def _on_mode_changed(self, _mode: Mode) -> None:
        self._apply_theme()
        self._refresh_timer()

    def _on_running_changed(self, running: bool) -> None:
        self._tray_icon.setIcon(_make_tray_icon(self._engine.mode, running))
        self._status_bar.showMessage("Running" if running else "Paused")
        self._refresh_timer()

    def _on_interval_completed(self, completed: Mode, cycles: int) -> None:
        if completed == Mode.WORK:
            kind = "long break" if self._engine.is_long_break else "break"
            self._status_bar.showMessage(
                f"Cycle {cycles} done. Start your {kind} when ready."
            )
        else:
            self._status_bar.showMessage("Break over. Start when ready.")

    # ══════════════════════════════════════════════════════════════════
    #  USER ACTIONS
    # ══════════════════════════════════════════════════════════════════

    def _on_config_applied(self, config: SessionConfig) -> None:
        try:
            self._engine.apply_config(config)
        except InvalidConfig as exc:
            self._status_bar.showMessage(str(exc))
            return
        self._settings.update_from_config(config)
        save_settings(self._settings)
        self._apply_theme()
        self._refresh_timer()
        self._status_bar.showMessage("Durations applied")

    def _toggle_theme(self) -> None:
        self._theme = toggled_theme(self._theme)
        save_theme(self._store, self._theme)
        logger.info("Theme set to %s", self._theme)
        self._apply_theme()

    def _show_window(self) -> None:
        self.show()
        self.raise_()
        self.activateWindow()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._engine.pause()
        self._clock_timer.stop()
        self._tray_icon.hide()
        event.accept()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Space starts/pauses, Escape resets."""
        key = event.key()
        if key == Qt.Key.Key_Space and not event.modifiers():
            self._engine.toggle_running()
            event.accept()
            return
        if key == Qt.Key.Key_Escape:
            self._engine.reset()
            event.accept()
            return
        super().keyPressEvent(event)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    @property
    def engine(self) -> SessionEngine:
        return self._engine

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    @property
    def theme(self) -> str:
        return self._theme
