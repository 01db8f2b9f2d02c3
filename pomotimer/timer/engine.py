"""Countdown state machine for PomoTimer.

Status
------
IDLE      Not counting down; ``time_remaining`` is where a start resumes.
RUNNING   Tick loop active, counting towards an absolute end timestamp.
PAUSED    Frozen mid-countdown.

Mode cycles independently of status::

    FOCUS → SHORT_BREAK | LONG_BREAK → FOCUS → ...

Transitions
-----------
IDLE | PAUSED → RUNNING                     (start)
RUNNING → PAUSED                            (pause)
RUNNING → IDLE | RUNNING (next mode)        (countdown reaches 0)
Any → IDLE (next mode)                      (complete)

Countdown
---------
On entering RUNNING the engine fixes ``end = now + remaining``.  Every
poll recomputes ``remaining`` from that timestamp rather than
decrementing, so a late or throttled poll never accumulates drift.  The
poll is a ``QTimer`` that is stopped on every exit from RUNNING, before
completion bookkeeping runs, so a countdown completes at most once.
"""

from __future__ import annotations

import json
import logging
import math
import time
from collections.abc import Callable, Mapping
from datetime import date

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..constants import STORAGE_KEYS, TIMER_TICK_INTERVAL, duration_for_mode, validate_mode
from ..modes import TimerMode, TimerStatus, TimerSnapshot
from ..settings import Settings, SettingsStore
from .today import load_today_sessions, record_focus_session

logger = logging.getLogger(__name__)


def wall_clock_ms() -> float:
    return time.time() * 1000


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Qt-based Pomodoro countdown with persistence and daily counts.

    Signals
    -------
    tick(remaining_seconds: int)
        Emitted while running, only when the whole-second value changes.
    state_changed(snapshot: TimerSnapshot)
        Emitted on every change to the timer state.
    settings_changed(settings: Settings)
        Re-emitted from the settings store after each update.
    completed(mode: TimerMode)
        Emitted exactly once per completed mode, after bookkeeping.
    """

    tick = pyqtSignal(int)
    state_changed = pyqtSignal(object)
    settings_changed = pyqtSignal(object)
    completed = pyqtSignal(object)

    def __init__(
        self,
        storage,
        parent: QObject | None = None,
        *,
        on_complete: Callable[[TimerMode], None] | None = None,
        clock: Callable[[], float] = wall_clock_ms,
        today: Callable[[], date] = date.today,
        tick_interval: int = TIMER_TICK_INTERVAL,
    ) -> None:
        super().__init__(parent)

        self._storage = storage
        self._clock = clock
        self._today = today

        # ── settings ──────────────────────────────────────────────────
        self._settings_store = SettingsStore(storage, parent=self)
        self._settings_store.changed.connect(self._on_settings_changed)

        # ── timer state ───────────────────────────────────────────────
        self._mode: TimerMode = TimerMode.FOCUS
        self._status: TimerStatus = TimerStatus.IDLE
        self._remaining: int = self._duration(TimerMode.FOCUS)
        self._completed_sessions: int = 0
        self._restore_state()

        self._today_date: date = self._today()
        self._today_sessions: int = load_today_sessions(storage, self._today_date)

        # ── tick loop ─────────────────────────────────────────────────
        self._end_ms: float | None = None
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(tick_interval)
        self._qt_timer.timeout.connect(self._on_tick)

        if on_complete is not None:
            self.completed.connect(on_complete)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def mode(self) -> TimerMode:
        return self._mode

    @property
    def status(self) -> TimerStatus:
        return self._status

    @property
    def remaining(self) -> int:
        """Seconds left on the clock."""
        return self._remaining

    @property
    def completed_sessions(self) -> int:
        return self._completed_sessions

    @property
    def today_sessions(self) -> int:
        self._check_rollover()
        return self._today_sessions

    @property
    def is_running(self) -> bool:
        return self._status == TimerStatus.RUNNING

    def get_state(self) -> TimerSnapshot:
        self._check_rollover()
        return TimerSnapshot(
            mode=self._mode,
            status=self._status,
            time_remaining=self._remaining,
            completed_sessions=self._completed_sessions,
            today_sessions=self._today_sessions,
        )

    def get_settings(self) -> Settings:
        return self._settings_store.settings

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Begin or resume the countdown.  No-op while running."""
        if self._status == TimerStatus.RUNNING:
            return
        self._status = TimerStatus.RUNNING
        self._start_loop()
        self._persist_state()
        self._emit_state()

    def pause(self) -> None:
        """Freeze the countdown.  Only valid while running."""
        if self._status != TimerStatus.RUNNING:
            return
        self._stop_loop()
        self._status = TimerStatus.PAUSED
        self._persist_state()
        self._emit_state()

    def complete(self) -> None:
        """Finish the current mode now.  Always lands in IDLE."""
        self._stop_loop()
        self._finish(auto_start=False)

    def update_settings(self, changes: Mapping | None = None, **kwargs) -> Settings:
        """Validate and apply a partial settings change.

        An idle countdown is re-synced to the edited duration; a running
        or paused one keeps its remaining time.
        """
        return self._settings_store.update(changes, **kwargs)

    def shutdown(self) -> None:
        """Cancel the tick loop.  Call on application teardown."""
        self._stop_loop()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — tick loop
    # ══════════════════════════════════════════════════════════════════

    def _start_loop(self) -> None:
        self._qt_timer.stop()
        self._end_ms = self._clock() + self._remaining * 1000
        self._qt_timer.start()

    def _stop_loop(self) -> None:
        self._qt_timer.stop()
        self._end_ms = None

    def _on_tick(self) -> None:
        if self._end_ms is None:
            return
        remaining = max(0, math.floor((self._end_ms - self._clock()) / 1000 + 0.5))

        if remaining <= 0:
            # stop first: nothing may complete this countdown twice
            self._stop_loop()
            self._remaining = 0
            self.tick.emit(0)
            self._finish(auto_start=self.get_settings().auto_start_next)
            return

        if remaining != self._remaining:
            self._remaining = remaining
            self.tick.emit(remaining)
            self._emit_state()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — completion
    # ══════════════════════════════════════════════════════════════════

    def _finish(self, *, auto_start: bool) -> None:
        settings = self.get_settings()
        completed_mode = self._mode

        if completed_mode == TimerMode.FOCUS:
            self._completed_sessions += 1
            today = self._today()
            self._today_sessions = record_focus_session(
                self._storage, today, self._today_sessions, self._today_date
            )
            self._today_date = today
            if self._completed_sessions % settings.long_break_interval == 0:
                self._mode = TimerMode.LONG_BREAK
            else:
                self._mode = TimerMode.SHORT_BREAK
        else:
            self._mode = TimerMode.FOCUS

        self._remaining = self._duration(self._mode)
        if auto_start:
            self._status = TimerStatus.RUNNING
            self._start_loop()
        else:
            self._status = TimerStatus.IDLE

        self._persist_state()
        self.completed.emit(completed_mode)
        self._emit_state()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — settings & persistence
    # ══════════════════════════════════════════════════════════════════

    def _duration(self, mode: TimerMode) -> int:
        return duration_for_mode(mode, self._settings_store.settings)

    def _check_rollover(self) -> None:
        """Re-read the daily count once the calendar day has changed."""
        today = self._today()
        if today != self._today_date:
            self._today_date = today
            self._today_sessions = load_today_sessions(self._storage, today)

    def _on_settings_changed(self, settings: Settings) -> None:
        if self._status == TimerStatus.IDLE:
            self._remaining = self._duration(self._mode)
            self._persist_state()
            self._emit_state()
        self.settings_changed.emit(settings)

    def _restore_state(self) -> None:
        """Load mode, session count and idle remaining time from storage.

        Status is never restored: a countdown cannot survive a restart.
        """
        raw = self._storage.get(STORAGE_KEYS["state"])
        if raw is None:
            return
        try:
            data = json.loads(raw)
        except ValueError:
            logger.debug("Discarding unreadable timer-state blob")
            return
        if not isinstance(data, dict):
            return

        self._mode = validate_mode(data.get("mode"))
        full = self._duration(self._mode)

        completed = data.get("completed_sessions")
        if isinstance(completed, int) and not isinstance(completed, bool) and completed >= 0:
            self._completed_sessions = completed

        remaining = data.get("time_remaining")
        if isinstance(remaining, bool) or not isinstance(remaining, (int, float)):
            self._remaining = full
        elif isinstance(remaining, int):
            self._remaining = min(full, remaining) if remaining > 0 else full
        elif math.isfinite(remaining) and remaining > 0:
            self._remaining = max(1, min(full, math.floor(remaining + 0.5)))
        else:
            self._remaining = full

    def _persist_state(self) -> None:
        data = {
            "mode": self._mode.value,
            "completed_sessions": self._completed_sessions,
        }
        if self._status == TimerStatus.IDLE:
            data["time_remaining"] = self._remaining
        self._storage.set(STORAGE_KEYS["state"], json.dumps(data))

    def _emit_state(self) -> None:
        self.state_changed.emit(self.get_state())
