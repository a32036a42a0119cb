"""Timer package."""

from .engine import (
    SessionEngine,
    SessionConfig,
    SessionState,
    Mode,
    InvalidConfig,
    select_duration,
    reconcile,
    progress_percent,
    format_remaining,
    CYCLE_THRESHOLD,
)

__all__ = [
    "SessionEngine",
    "SessionConfig",
    "SessionState",
    "Mode",
    "InvalidConfig",
    "select_duration",
    "reconcile",
    "progress_percent",
    "format_remaining",
    "CYCLE_THRESHOLD",
]
