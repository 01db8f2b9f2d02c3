"""Formatting helpers for showing the timer as text."""

from __future__ import annotations

from .modes import TimerMode


_MODE_LABELS: dict[TimerMode, str] = {
    TimerMode.FOCUS: "Focus",
    TimerMode.SHORT_BREAK: "Break",
    TimerMode.LONG_BREAK: "Long Break",
}


def format_time(seconds: int) -> str:
    """MM:SS with leading zeros, e.g. ``125 -> "02:05"``."""
    mins, secs = divmod(seconds, 60)
    return f"{mins:02d}:{secs:02d}"


def format_time_mini(seconds: int) -> str:
    """M:SS without a leading zero on minutes, e.g. ``125 -> "2:05"``."""
    mins, secs = divmod(seconds, 60)
    return f"{mins}:{secs:02d}"


def mode_label(mode: TimerMode) -> str:
    return _MODE_LABELS[mode]


def completion_message(mode: TimerMode) -> str:
    """Short notice shown after *mode* finishes."""
    if mode == TimerMode.FOCUS:
        return "Session complete"
    return "Break over"
