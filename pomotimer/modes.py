"""Timer mode / status enums and the read-only state snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TimerMode(Enum):
    FOCUS = "focus"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"


class TimerStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True)
class TimerSnapshot:
    """What the presentation layer sees of the engine at one instant."""

    mode: TimerMode
    status: TimerStatus
    time_remaining: int           # seconds
    completed_sessions: int
    today_sessions: int
