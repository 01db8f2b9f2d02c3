"""PomoTimer: a Pomodoro countdown engine with persisted progress."""

__version__ = "0.1.0"
