"""User settings: validation, persistence and atomic updates.

Settings are stored as one JSON blob under ``STORAGE_KEYS["settings"]``.
Everything that comes in, whether from storage or from an update, goes
through :func:`validate_settings`, so a ``Settings`` instance is always
within bounds.

Usage::

    store = SettingsStore(KeyValueStorage())
    store.update(focus_duration=50)
    store.settings.focus_duration   # 50
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, asdict, fields

from PyQt6.QtCore import QObject, pyqtSignal

from .constants import DEFAULT_SETTINGS, SETTINGS_BOUNDS, STORAGE_KEYS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """All user-configurable preferences."""

    # ── timer (minutes) ───────────────────────────────────────────────
    focus_duration: int = DEFAULT_SETTINGS["focus_duration"]
    short_break_duration: int = DEFAULT_SETTINGS["short_break_duration"]
    long_break_duration: int = DEFAULT_SETTINGS["long_break_duration"]
    long_break_interval: int = DEFAULT_SETTINGS["long_break_interval"]
    auto_start_next: bool = DEFAULT_SETTINGS["auto_start_next"]

    # ── audio ─────────────────────────────────────────────────────────
    sound_enabled: bool = DEFAULT_SETTINGS["sound_enabled"]


def _clamp(value: object, low: int, high: int, fallback: int) -> int:
    # bool is an int subclass but never a valid duration
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return fallback
    if isinstance(value, int):
        # arbitrarily large ints do not fit in a float
        return max(low, min(high, value))
    if math.isnan(value):
        return fallback
    if math.isinf(value):
        return high if value > 0 else low
    return max(low, min(high, math.floor(value + 0.5)))


def validate_settings(data: Mapping) -> Settings:
    """Build a fully valid ``Settings`` from an untrusted mapping.

    Never fails: numbers are rounded and clamped into their bounds,
    anything missing or of the wrong type becomes the default.
    """
    values: dict[str, int | bool] = {}
    for name, (low, high) in SETTINGS_BOUNDS.items():
        values[name] = _clamp(data.get(name), low, high, DEFAULT_SETTINGS[name])
    for name in ("auto_start_next", "sound_enabled"):
        value = data.get(name)
        values[name] = value if isinstance(value, bool) else DEFAULT_SETTINGS[name]
    return Settings(**values)


class SettingsStore(QObject):
    """Owns the live ``Settings`` and writes every change to storage.

    Signals
    -------
    changed(settings: Settings)
        Emitted after every successful :meth:`update`.
    """

    changed = pyqtSignal(object)

    def __init__(self, storage, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._storage = storage
        self._settings: Settings = self.load()

    @property
    def settings(self) -> Settings:
        return self._settings

    def load(self) -> Settings:
        """Read persisted settings, falling back to defaults."""
        raw = self._storage.get(STORAGE_KEYS["settings"])
        if raw is None:
            return Settings()
        try:
            data = json.loads(raw)
        except ValueError:
            logger.debug("Discarding unreadable settings blob")
            return Settings()
        if not isinstance(data, dict):
            return Settings()
        return validate_settings(data)

    def update(self, changes: Mapping | None = None, **kwargs) -> Settings:
        """Merge *changes* into the current settings, validate, persist.

        Unknown keys are ignored.  Invalid values are replaced by the
        default for that field.
        """
        merged = asdict(self._settings)
        valid_keys = {f.name for f in fields(Settings)}
        for key, value in {**(changes or {}), **kwargs}.items():
            if key in valid_keys:
                merged[key] = value
        self._settings = validate_settings(merged)
        self.save()
        self.changed.emit(self._settings)
        return self._settings

    def save(self) -> None:
        self._storage.set(
            STORAGE_KEYS["settings"], json.dumps(asdict(self._settings))
        )
