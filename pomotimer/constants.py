"""Shared constants: storage keys, settings bounds and defaults.

Durations in settings are whole minutes; the engine works in seconds.
"""

from __future__ import annotations

from .modes import TimerMode


# ── storage keys ──────────────────────────────────────────────────────────

STORAGE_KEYS: dict[str, str] = {
    "size": "pomodoro-size",
    "settings": "pomodoro-settings",
    "state": "pomodoro-state",
    "today": "pomodoro-today",
}

# ── settings ──────────────────────────────────────────────────────────────

SETTINGS_BOUNDS: dict[str, tuple[int, int]] = {
    "focus_duration": (1, 60),
    "short_break_duration": (1, 30),
    "long_break_duration": (1, 60),
    "long_break_interval": (2, 10),
}

DEFAULT_SETTINGS: dict[str, int | bool] = {
    "focus_duration": 25,
    "short_break_duration": 5,
    "long_break_duration": 15,
    "long_break_interval": 4,
    "auto_start_next": False,
    "sound_enabled": True,
}

# ── timing ────────────────────────────────────────────────────────────────

TIMER_TICK_INTERVAL = 250  # ms

_MODE_TO_FIELD: dict[TimerMode, str] = {
    TimerMode.FOCUS: "focus_duration",
    TimerMode.SHORT_BREAK: "short_break_duration",
    TimerMode.LONG_BREAK: "long_break_duration",
}


def duration_for_mode(mode: TimerMode, settings) -> int:
    """Seconds on the clock for a freshly entered *mode*."""
    return getattr(settings, _MODE_TO_FIELD[mode]) * 60


def validate_mode(value: object) -> TimerMode:
    """Coerce a stored mode string to a ``TimerMode`` (default Focus)."""
    if isinstance(value, str):
        try:
            return TimerMode(value)
        except ValueError:
            pass
    return TimerMode.FOCUS
