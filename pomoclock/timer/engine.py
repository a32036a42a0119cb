"""Session state machine for PomoClock.

Modes
-----
WORK     Focus interval counting down.
BREAK    Break interval (short or long) counting down.

Each mode is crossed with ``is_running``.  The engine never continues on
its own across a boundary: reaching zero always pauses.

Transitions
-----------
WORK  → BREAK     (interval reaches 0, cycles_completed += 1)
BREAK → WORK      (interval reaches 0)
Any   → WORK      (reset, cycles_completed = 0)
Any   → same mode (apply_config, cycles_completed = 0)

Durations are recomputed by a single pure function, :func:`reconcile`,
after every state-changing operation.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class Mode(Enum):
    WORK = "work"
    BREAK = "break"


# ── constants ─────────────────────────────────────────────────────────────

DEFAULT_WORK = 25 * 60
DEFAULT_BREAK = 5 * 60
DEFAULT_LONG_BREAK = 15 * 60
CYCLE_THRESHOLD = 10

TICK_INTERVAL_MS = 1000

WORK_END_MESSAGE = "Work session complete! Time for a break."
BREAK_END_MESSAGE = "Break over! Time to focus again."
WORK_END_SOUND = "alarm-work-end"
BREAK_END_SOUND = "alarm-break-end"


# ── errors ────────────────────────────────────────────────────────────────


class InvalidConfig(ValueError):
    """A duration or cycle threshold that the engine must never see."""


# ── data model ────────────────────────────────────────────────────────────


@dataclass
class SessionConfig:
    """User-editable durations (seconds) and the long-break threshold."""

    work_duration: int = DEFAULT_WORK
    break_duration: int = DEFAULT_BREAK
    long_break_duration: int = DEFAULT_LONG_BREAK
    cycle_threshold: int = CYCLE_THRESHOLD

    def validate(self) -> SessionConfig:
        """Raise :class:`InvalidConfig` unless every field is a positive int."""
        for name in (
            "work_duration",
            "break_duration",
            "long_break_duration",
            "cycle_threshold",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfig(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise InvalidConfig(f"{name} must be at least 1, got {value}")
        return self

    @classmethod
    def from_minutes(
        cls,
        work_minutes,
        break_minutes,
        cycle_threshold,
        long_break_minutes,
    ) -> SessionConfig:
        """Build a config from the four user-facing form values.

        Minutes may be fractional (``0.5`` → 30 s); the cycle count must be
        whole.  Anything non-numeric or non-positive raises
        :class:`InvalidConfig`.
        """
        config = cls(
            work_duration=_minutes_to_seconds("work", work_minutes),
            break_duration=_minutes_to_seconds("break", break_minutes),
            long_break_duration=_minutes_to_seconds(
                "long break", long_break_minutes,
            ),
            cycle_threshold=_whole_number("long break cycles", cycle_threshold),
        )
        return config.validate()


@dataclass
class SessionState:
    """The live timer."""

    mode: Mode = Mode.WORK
    seconds_left: int = DEFAULT_WORK
    total_session_time: int = DEFAULT_WORK
    cycles_completed: int = 0
    is_running: bool = False

    @classmethod
    def initial(cls, config: SessionConfig) -> SessionState:
        return cls(
            mode=Mode.WORK,
            seconds_left=config.work_duration,
            total_session_time=config.work_duration,
            cycles_completed=0,
            is_running=False,
        )


def _to_number(label: str, value) -> float:
    if isinstance(value, bool):
        raise InvalidConfig(f"{label}: expected a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidConfig(f"{label}: expected a number, got {value!r}") from None
    if not math.isfinite(number):
        raise InvalidConfig(f"{label}: expected a finite number, got {value!r}")
    return number


def _minutes_to_seconds(label: str, value) -> int:
    seconds = round(_to_number(label, value) * 60)
    if seconds < 1:
        raise InvalidConfig(f"{label}: duration must be positive, got {value!r}")
    return seconds


def _whole_number(label: str, value) -> int:
    number = _to_number(label, value)
    if number != int(number):
        raise InvalidConfig(f"{label}: expected a whole number, got {value!r}")
    if number < 1:
        raise InvalidConfig(f"{label}: must be at least 1, got {value!r}")
    return int(number)


# ── pure rules ────────────────────────────────────────────────────────────


def is_long_break(cycles_completed: int, cycle_threshold: int) -> bool:
    """True when the break after *cycles_completed* cycles is a long one.

    A threshold below 1 never yields a long break.
    """
    if cycle_threshold < 1:
        return False
    return cycles_completed != 0 and cycles_completed % cycle_threshold == 0


def select_duration(
    mode: Mode, cycles_completed: int, config: SessionConfig
) -> int:
    if mode == Mode.WORK:
        return config.work_duration
    if is_long_break(cycles_completed, config.cycle_threshold):
        return config.long_break_duration
    return config.break_duration


def reconcile(state: SessionState, config: SessionConfig) -> SessionState:
    """Return *state* with its interval length re-derived from *config*.

    Running states are left untouched; a paused state gets a fresh
    ``total_session_time`` and ``seconds_left``.
    """
    if state.is_running:
        return state
    duration = select_duration(state.mode, state.cycles_completed, config)
    return replace(state, seconds_left=duration, total_session_time=duration)


def progress_percent(seconds_left: int, total_session_time: int) -> float:
    """0.0 → 100.0 progress through the current interval."""
    if total_session_time <= 0:
        return 0.0
    pct = 100.0 * (1.0 - seconds_left / total_session_time)
    return max(0.0, min(100.0, pct))


def format_remaining(seconds_left: int) -> str:
    """``125`` → ``"02:05"``; minutes are not wrapped at 60."""
    seconds_left = max(0, int(seconds_left))
    minutes, seconds = divmod(seconds_left, 60)
    return f"{minutes:02d}:{seconds:02d}"


# ── engine ────────────────────────────────────────────────────────────────


class SessionEngine(QObject):
    """Qt-driven Pomodoro session engine.

    The engine owns one ``QTimer`` as its tick source and never calls a
    notifier or sound player itself; side effects leave as signals.

    Signals
    -------
    ticked(seconds_left: int)
        Emitted after every tick that changed the countdown.
    mode_changed(mode: Mode)
        Emitted whenever the mode flips (completion or reset).
    running_changed(is_running: bool)
        Emitted whenever the countdown starts or stops.
    interval_completed(completed_mode: Mode, cycles_completed: int)
        Emitted after an interval reaches zero and the state is updated.
    config_applied(config: SessionConfig)
        Emitted after :meth:`apply_config` stored a new config.
    notify_requested(message: str)
        A desktop notification should be shown.
    sound_requested(name: str)
        An alert sound should be played.
    """

    ticked = pyqtSignal(int)
    mode_changed = pyqtSignal(object)
    running_changed = pyqtSignal(bool)
    interval_completed = pyqtSignal(object, int)
    config_applied = pyqtSignal(object)
    notify_requested = pyqtSignal(str)
    sound_requested = pyqtSignal(str)

    def __init__(
        self,
        config: SessionConfig | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._config: SessionConfig = (config or SessionConfig()).validate()
        self._state: SessionState = SessionState.initial(self._config)

        # Recreated on every start so a stale countdown can't race a new one
        self._qt_timer: QTimer | None = None

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def config(self) -> SessionConfig:
        return replace(self._config)

    @property
    def state(self) -> SessionState:
        """A copy of the live state."""
        return replace(self._state)

    @property
    def mode(self) -> Mode:
        return self._state.mode

    @property
    def seconds_left(self) -> int:
        return self._state.seconds_left

    @property
    def total_session_time(self) -> int:
        return self._state.total_session_time

    @property
    def cycles_completed(self) -> int:
        return self._state.cycles_completed

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def is_long_break(self) -> bool:
        return self._state.mode == Mode.BREAK and is_long_break(
            self._state.cycles_completed, self._config.cycle_threshold,
        )

    def progress_percent(self) -> float:
        return progress_percent(
            self._state.seconds_left, self._state.total_session_time,
        )

    def format_remaining(self) -> str:
        return format_remaining(self._state.seconds_left)

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def tick(self) -> None:
        """Advance the countdown by one second."""
        if not self._state.is_running:
            logger.debug("Dropped tick while paused")
            return
        if self._state.seconds_left > 0:
            self._state.seconds_left -= 1
            self.ticked.emit(self._state.seconds_left)
            return
        self._state.seconds_left = 0
        self.complete_interval()

    def complete_interval(self) -> None:
        """Close the current interval and prepare the next one, paused."""
        self._unsubscribe()
        completed = self._state.mode
        self._state.is_running = False

        if completed == Mode.WORK:
            self._state.cycles_completed += 1
            message, sound = WORK_END_MESSAGE, WORK_END_SOUND
            self._state.mode = Mode.BREAK
        else:
            message, sound = BREAK_END_MESSAGE, BREAK_END_SOUND
            self._state.mode = Mode.WORK

        self._state = reconcile(self._state, self._config)
        logger.info(
            "%s interval complete (cycles=%d, next=%s %ds)",
            completed.value,
            self._state.cycles_completed,
            self._state.mode.value,
            self._state.total_session_time,
        )

        self.running_changed.emit(False)
        self.mode_changed.emit(self._state.mode)
        self.ticked.emit(self._state.seconds_left)
        self.interval_completed.emit(completed, self._state.cycles_completed)

        self.notify_requested.emit(message)
        self.sound_requested.emit(sound)

    def toggle_running(self) -> None:
        """Start when paused, pause when running."""
        if self._state.is_running:
            self.pause()
        else:
            self.start()

    def start(self) -> None:
        """Resume the countdown.  No-op if already running."""
        if self._state.is_running:
            return
        if self._state.seconds_left <= 0:
            # Completion always pauses, so this only happens if the
            # countdown was driven to zero by hand.
            self.complete_interval()
        self._state.is_running = True
        self._subscribe()
        logger.info("Started %s (%s left)", self._state.mode.value,
                    self.format_remaining())
        self.running_changed.emit(True)

    def pause(self) -> None:
        """Freeze the countdown.  No-op if already paused."""
        if not self._state.is_running:
            return
        self._unsubscribe()
        self._state.is_running = False
        logger.info("Paused %s (%s left)", self._state.mode.value,
                    self.format_remaining())
        self.running_changed.emit(False)

    def reset(self) -> None:
        """Back to the first Work interval, paused, with no cycles."""
        self._unsubscribe()
        was_running = self._state.is_running
        previous_mode = self._state.mode
        self._state = reconcile(
            SessionState.initial(self._config), self._config,
        )
        logger.info("Session reset")

        if was_running:
            self.running_changed.emit(False)
        if previous_mode != self._state.mode:
            self.mode_changed.emit(self._state.mode)
        self.ticked.emit(self._state.seconds_left)

    def apply_config(self, new_config: SessionConfig) -> None:
        """Store *new_config*, stopping the timer and zeroing cycles.

        The config is validated before anything changes; an invalid one
        raises :class:`InvalidConfig` and leaves the engine as it was.
        """
        new_config = replace(new_config).validate()
        self._unsubscribe()
        was_running = self._state.is_running

        self._config = new_config
        self._state.is_running = False
        self._state.cycles_completed = 0
        self._state = reconcile(self._state, self._config)
        logger.info("Applied config %s", self._config)

        if was_running:
            self.running_changed.emit(False)
        self.config_applied.emit(replace(self._config))
        self.ticked.emit(self._state.seconds_left)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: tick subscription
    # ══════════════════════════════════════════════════════════════════

    def _subscribe(self) -> None:
        self._unsubscribe()
        timer = QTimer(self)
        timer.setInterval(TICK_INTERVAL_MS)
        timer.timeout.connect(self.tick)
        timer.start()
        self._qt_timer = timer

    def _unsubscribe(self) -> None:
        if self._qt_timer is None:
            return
        self._qt_timer.stop()
        self._qt_timer.timeout.disconnect(self.tick)
        self._qt_timer.deleteLater()
        self._qt_timer = None

    @property
    def is_subscribed(self) -> bool:
        """True while a tick source is attached."""
        return self._qt_timer is not None
