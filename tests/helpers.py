"""Shared test helpers for PomoClock."""

from pomoclock.timer.engine import SessionEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


def run_to_completion(engine: SessionEngine) -> int:
    """Start the engine and tick until the interval closes.

    Returns the number of ticks it took.  The last tick is the one that
    finds the countdown at zero.
    """
    engine.start()
    ticks = 0
    while engine.is_running:
        engine.tick()
        ticks += 1
    return ticks


def fast_complete(engine: SessionEngine) -> None:
    """Jump straight to the completing tick."""
    engine.start()
    engine._state.seconds_left = 0
    engine.tick()
