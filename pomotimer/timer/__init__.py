"""Timer package."""

from ..modes import TimerMode, TimerStatus, TimerSnapshot
from .engine import TimerEngine
from .today import load_today_sessions, record_focus_session, save_today_sessions

__all__ = [
    "TimerEngine",
    "TimerMode",
    "TimerStatus",
    "TimerSnapshot",
    "load_today_sessions",
    "record_focus_session",
    "save_today_sessions",
]
