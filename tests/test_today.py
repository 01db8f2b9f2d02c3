"""Tests for the daily session counter and its midnight rollover."""

import json
from datetime import date, timedelta

import pytest

from pomotimer.constants import STORAGE_KEYS
from pomotimer.timer.today import (
    load_today_sessions, record_focus_session, save_today_sessions,
)

TODAY = date(2026, 10, 19)
YESTERDAY = TODAY - timedelta(days=1)


class TestLoad:

    def test_nothing_stored(self, storage):
        assert load_today_sessions(storage, TODAY) == 0

    def test_same_day(self, storage):
        save_today_sessions(storage, TODAY, 4)
        assert load_today_sessions(storage, TODAY) == 4

    def test_other_day_reads_zero(self, storage):
        save_today_sessions(storage, YESTERDAY, 5)
        assert load_today_sessions(storage, TODAY) == 0

    @pytest.mark.parametrize("raw", [
        "oops",
        "[]",
        json.dumps({"date": "2026-10-19"}),
        json.dumps({"date": "2026-10-19", "sessions": -2}),
        json.dumps({"date": "2026-10-19", "sessions": "3"}),
        json.dumps({"date": "2026-10-19", "sessions": True}),
    ])
    def test_malformed_reads_zero(self, storage, raw):
        storage.set(STORAGE_KEYS["today"], raw)
        assert load_today_sessions(storage, TODAY) == 0


class TestRecord:

    def test_rollover_starts_from_zero(self, storage):
        save_today_sessions(storage, YESTERDAY, 5)
        assert record_focus_session(storage, TODAY, 5, YESTERDAY) == 1
        assert json.loads(storage.get(STORAGE_KEYS["today"])) == {
            "date": "2026-10-19", "sessions": 1,
        }

    def test_same_day_increments(self, storage):
        save_today_sessions(storage, TODAY, 2)
        assert record_focus_session(storage, TODAY, 2, TODAY) == 3

    def test_memory_covers_lost_write(self, storage):
        assert record_focus_session(storage, TODAY, 3, TODAY) == 4

    def test_memory_from_other_day_is_ignored(self, storage):
        assert record_focus_session(storage, TODAY, 3, YESTERDAY) == 1
