"""Shared pytest fixtures for PomoTimer tests."""

import os
import sys
from datetime import date

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from PyQt6.QtWidgets import QApplication

from pomotimer.database.db import configure_engine, init_db
from pomotimer.database.storage import KeyValueStorage
from pomotimer.timer.engine import TimerEngine

from helpers import FakeCalendar, FakeClock


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def storage():
    return KeyValueStorage()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def calendar():
    return FakeCalendar(date(2026, 10, 19))


@pytest.fixture
def make_engine(qapp, storage, clock, calendar):
    """Factory so tests can seed storage before the engine reads it."""
    engines = []

    def _make(**kwargs):
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("today", calendar)
        eng = TimerEngine(storage, **kwargs)
        engines.append(eng)
        return eng

    yield _make
    for eng in engines:
        eng.shutdown()


@pytest.fixture
def engine(make_engine):
    """Fresh TimerEngine on empty storage with default settings."""
    return make_engine()
