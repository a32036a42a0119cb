"""PomoClock: a Pomodoro session timer."""

__version__ = "0.1.0"
