"""Headless console host for PomoTimer.

Drives a :class:`TimerEngine` from commands typed on stdin and reports
state changes and completions on stdout.  The chime is played here, not
in the engine, so a broken audio stack never touches timer state.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from PyQt6.QtCore import QCoreApplication, QObject, QSocketNotifier

from .audio.sounds import SoundManager
from .format import completion_message, format_time, mode_label
from .modes import TimerMode, TimerStatus, TimerSnapshot
from .settings import Settings
from .timer.engine import TimerEngine

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "commands: start (s), pause (p), toggle (t), complete (c), "
    "set <field> <value>, status, help, quit (q)"
)


def _parse_value(text: str) -> object:
    lowered = text.lower()
    if lowered in ("true", "on", "yes"):
        return True
    if lowered in ("false", "off", "no"):
        return False
    for cast in (int, float):
        try:
            return cast(text)
        except ValueError:
            continue
    return text


def status_line(state: TimerSnapshot) -> str:
    return (
        f"{mode_label(state.mode):<10} {format_time(state.time_remaining)}  "
        f"{state.status.value:<7}  today {state.today_sessions}"
    )


class ConsoleApp(QObject):
    """Wires engine signals to terminal output and the chime."""

    def __init__(
        self,
        engine: TimerEngine,
        sound_manager: SoundManager | None = None,
        out: TextIO | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._engine = engine
        self._sound_manager = sound_manager
        self._out = out or sys.stdout
        self._last_key: tuple[TimerMode, TimerStatus] | None = None
        self._notifier: QSocketNotifier | None = None

        engine.state_changed.connect(self._on_state_changed)
        engine.completed.connect(self._on_completed)
        engine.settings_changed.connect(self._on_settings_changed)

    # ── commands ──────────────────────────────────────────────────────

    def handle_command(self, line: str) -> bool:
        """Run one typed command.  Returns False when the user quits."""
        parts = line.split()
        if not parts:
            return True
        cmd, args = parts[0].lower(), parts[1:]

        if cmd in ("start", "s"):
            self._engine.start()
        elif cmd in ("pause", "p"):
            self._engine.pause()
        elif cmd in ("toggle", "t"):
            if self._engine.is_running:
                self._engine.pause()
            else:
                self._engine.start()
        elif cmd in ("complete", "c"):
            self._engine.complete()
        elif cmd == "set":
            if len(args) != 2:
                self._write("usage: set <field> <value>")
            else:
                self._engine.update_settings({args[0]: _parse_value(args[1])})
        elif cmd == "status":
            self._write(status_line(self._engine.get_state()))
        elif cmd in ("quit", "q", "exit"):
            return False
        else:
            self._write(HELP_TEXT)
        return True

    def attach_stdin(self) -> None:
        """Read commands from stdin inside the Qt event loop."""
        self._notifier = QSocketNotifier(
            sys.stdin.fileno(), QSocketNotifier.Type.Read, self
        )
        self._notifier.activated.connect(self._on_stdin_ready)

    # ── slots ─────────────────────────────────────────────────────────

    def _on_stdin_ready(self, *_args) -> None:
        line = sys.stdin.readline()
        if not line or not self.handle_command(line):
            self._engine.shutdown()
            QCoreApplication.quit()

    def _on_state_changed(self, state: TimerSnapshot) -> None:
        key = (state.mode, state.status)
        if key != self._last_key:
            self._last_key = key
            self._write(status_line(state))

    def _on_completed(self, mode: TimerMode) -> None:
        self._write(f"** {completion_message(mode)} **")
        if self._sound_manager is not None and self._engine.get_settings().sound_enabled:
            self._sound_manager.play()

    def _on_settings_changed(self, settings: Settings) -> None:
        self._write(
            f"settings: focus {settings.focus_duration}m, "
            f"short {settings.short_break_duration}m, "
            f"long {settings.long_break_duration}m every "
            f"{settings.long_break_interval}, "
            f"auto-start {'on' if settings.auto_start_next else 'off'}, "
            f"sound {'on' if settings.sound_enabled else 'off'}"
        )

    def _write(self, text: str) -> None:
        print(text, file=self._out, flush=True)
