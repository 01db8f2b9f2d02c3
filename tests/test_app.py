"""Tests for the console host: command parsing, output and the chime."""

import io

import pytest

from pomotimer.app import ConsoleApp, HELP_TEXT, _parse_value, status_line
from pomotimer.modes import TimerMode, TimerStatus


class FakeSound:
    def __init__(self):
        self.plays = 0

    def play(self):
        self.plays += 1


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def sound():
    return FakeSound()


@pytest.fixture
def console(engine, sound, out):
    return ConsoleApp(engine, sound, out=out)


class TestCommands:

    def test_start_and_pause(self, console, engine):
        console.handle_command("start")
        assert engine.status == TimerStatus.RUNNING
        console.handle_command("p")
        assert engine.status == TimerStatus.PAUSED

    def test_toggle(self, console, engine):
        console.handle_command("t")
        assert engine.status == TimerStatus.RUNNING
        console.handle_command("toggle")
        assert engine.status == TimerStatus.PAUSED
        console.handle_command("toggle")
        assert engine.status == TimerStatus.RUNNING

    def test_complete(self, console, engine, out):
        console.handle_command("c")
        assert engine.mode == TimerMode.SHORT_BREAK
        assert "** Session complete **" in out.getvalue()

    def test_set_updates_settings(self, console, engine):
        console.handle_command("set focus_duration 10")
        assert engine.get_settings().focus_duration == 10
        assert engine.remaining == 600

    def test_set_boolean(self, console, engine):
        console.handle_command("set auto_start_next on")
        assert engine.get_settings().auto_start_next is True

    def test_set_usage(self, console, out):
        console.handle_command("set focus_duration")
        assert "usage: set <field> <value>" in out.getvalue()

    def test_status(self, console, out):
        console.handle_command("status")
        assert "Focus      25:00  idle     today 0" in out.getvalue()

    def test_quit(self, console):
        assert console.handle_command("quit") is False
        assert console.handle_command("q") is False

    def test_blank_line(self, console):
        assert console.handle_command("   ") is True

    def test_unknown_prints_help(self, console, out):
        console.handle_command("dance")
        assert HELP_TEXT in out.getvalue()


class TestOutput:

    def test_status_line_printed_on_transition_only(self, console, engine, clock, out):
        console.handle_command("start")
        clock.advance(5)
        engine._on_tick()
        lines = out.getvalue().splitlines()
        assert lines == ["Focus      25:00  running  today 0"]

    def test_status_line_format(self, engine):
        engine.complete()
        assert status_line(engine.get_state()) == "Break      05:00  idle     today 1"

    def test_settings_summary(self, console, out):
        console.handle_command("set sound_enabled off")
        assert "sound off" in out.getvalue()


class TestChime:

    def test_played_on_completion(self, console, sound):
        console.handle_command("complete")
        assert sound.plays == 1

    def test_not_played_when_sound_disabled(self, console, sound):
        console.handle_command("set sound_enabled false")
        console.handle_command("complete")
        assert sound.plays == 0

    def test_no_sound_manager(self, engine, out):
        console = ConsoleApp(engine, None, out=out)
        console.handle_command("complete")
        assert "Session complete" in out.getvalue()


@pytest.mark.parametrize("text,expected", [
    ("10", 10), ("2.5", 2.5), ("true", True), ("OFF", False), ("abc", "abc"),
])
def test_parse_value(text, expected):
    assert _parse_value(text) == expected
