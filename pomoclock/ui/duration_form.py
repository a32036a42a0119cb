"""Duration settings row with an Apply button.

Four fields feed :meth:`SessionEngine.apply_config`: work minutes, break
minutes, long-break cycle count, long-break minutes.  Minute fields take
two decimals (0.5 min is 30 s), so any whole-second duration survives a
round trip through the form.  The values still pass through
:meth:`SessionConfig.from_minutes` before leaving the widget.
"""

from __future__ import annotations

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QFormLayout,
    QSpinBox, QDoubleSpinBox, QPushButton,
)

from ..timer.engine import SessionConfig, InvalidConfig

MINUTE_DECIMALS = 2
MIN_MINUTES = 0.01        # rounds to one second
MAX_MINUTES = 24 * 60
MAX_CYCLES = 99


class DurationForm(QWidget):
    """Emits ``applied(SessionConfig)`` or ``rejected(str)`` on Apply."""

    applied = pyqtSignal(object)
    rejected = pyqtSignal(str)

    def __init__(
        self, config: SessionConfig, parent: QWidget | None = None
    ) -> None:
        super().__init__(parent)
        self._build_ui()
        self.set_config(config)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(8)

        fields = QHBoxLayout()
        fields.setSpacing(16)

        left = QFormLayout()
        left.setHorizontalSpacing(12)
        self._work_spin = self._minutes_spin()
        left.addRow("Work (min)", self._work_spin)
        self._break_spin = self._minutes_spin()
        left.addRow("Break (min)", self._break_spin)

        right = QFormLayout()
        right.setHorizontalSpacing(12)
        self._cycles_spin = QSpinBox(self)
        self._cycles_spin.setRange(1, MAX_CYCLES)
        right.addRow("Long break cycles", self._cycles_spin)
        self._long_spin = self._minutes_spin()
        right.addRow("Long break (min)", self._long_spin)

        fields.addLayout(left)
        fields.addLayout(right)
        root.addLayout(fields)

        btn_row = QHBoxLayout()
        btn_row.addStretch()
        self._apply_btn = QPushButton("Apply", self)
        self._apply_btn.setObjectName("secondaryButton")
        self._apply_btn.clicked.connect(self.apply)
        btn_row.addWidget(self._apply_btn)
        root.addLayout(btn_row)

    def _minutes_spin(self) -> QDoubleSpinBox:
        spin = QDoubleSpinBox(self)
        spin.setDecimals(MINUTE_DECIMALS)
        spin.setRange(MIN_MINUTES, MAX_MINUTES)
        spin.setSingleStep(1.0)
        spin.setSuffix(" min")
        return spin

    # ── public ────────────────────────────────────────────────────────────

    def set_config(self, config: SessionConfig) -> None:
        _show_minutes(self._work_spin, config.work_duration)
        _show_minutes(self._break_spin, config.break_duration)
        _show_minutes(self._long_spin, config.long_break_duration)
        # A saved threshold above the usual cap widens the field.
        if config.cycle_threshold > self._cycles_spin.maximum():
            self._cycles_spin.setMaximum(config.cycle_threshold)
        self._cycles_spin.setValue(config.cycle_threshold)

    def config(self) -> SessionConfig:
        """The entered values as a validated config."""
        return SessionConfig.from_minutes(
            self._work_spin.value(),
            self._break_spin.value(),
            self._cycles_spin.value(),
            self._long_spin.value(),
        )

    def apply(self) -> None:
        try:
            config = self.config()
        except InvalidConfig as exc:
            self.rejected.emit(str(exc))
            return
        self.applied.emit(config)


def _show_minutes(spin: QDoubleSpinBox, seconds: int) -> None:
    # Two decimals of a minute is 0.6 s, so rounding back to whole
    # seconds always recovers *seconds*.
    minutes = round(seconds / 60, MINUTE_DECIMALS)
    if minutes > spin.maximum():
        spin.setMaximum(minutes)
    spin.setValue(minutes)
