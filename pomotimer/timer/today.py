"""Daily session counter with midnight rollover.

The counter lives in storage as ``{"date": "2026-10-19", "sessions": 3}``.
A stored date other than today means the count belongs to an earlier
day and reads as zero.
"""

from __future__ import annotations

import json
import logging
from datetime import date

from ..constants import STORAGE_KEYS

logger = logging.getLogger(__name__)


def load_today_sessions(storage, today: date) -> int:
    """Sessions completed on *today* according to storage."""
    raw = storage.get(STORAGE_KEYS["today"])
    if raw is None:
        return 0
    try:
        data = json.loads(raw)
        stored_date = data["date"]
        sessions = data["sessions"]
    except (ValueError, TypeError, KeyError):
        logger.debug("Discarding unreadable today-sessions blob")
        return 0
    if stored_date != today.isoformat():
        return 0
    if isinstance(sessions, bool) or not isinstance(sessions, int) or sessions < 0:
        return 0
    return sessions


def save_today_sessions(storage, today: date, sessions: int) -> None:
    storage.set(
        STORAGE_KEYS["today"],
        json.dumps({"date": today.isoformat(), "sessions": sessions}),
    )


def record_focus_session(
    storage, today: date, in_memory: int, in_memory_date: date | None
) -> int:
    """Count one more focus session for *today* and persist the result.

    Storage is re-read first so a process left open past midnight starts
    the new day from zero.  The in-memory count only wins when it belongs
    to the same day, which covers storage that silently dropped a write.
    """
    base = load_today_sessions(storage, today)
    if in_memory_date == today:
        base = max(base, in_memory)
    sessions = base + 1
    save_today_sessions(storage, today, sessions)
    return sessions
