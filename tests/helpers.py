"""Shared test helpers for PomoTimer."""

from datetime import date, timedelta

from pomotimer.timer.engine import TimerEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start_ms: float = 1_000_000.0):
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, seconds: float) -> None:
        self.now_ms += seconds * 1000


class FakeCalendar:
    """Manually advanced local date."""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today

    def next_day(self) -> None:
        self.today += timedelta(days=1)


def run_for(engine: TimerEngine, clock: FakeClock, seconds: float, step: float = 0.25) -> None:
    """Advance the clock in *step* increments, polling after each."""
    elapsed = 0.0
    while elapsed < seconds:
        delta = min(step, seconds - elapsed)
        clock.advance(delta)
        elapsed += delta
        engine._on_tick()


def expire(engine: TimerEngine, clock: FakeClock) -> None:
    """Jump the clock to the end of the running countdown and poll once."""
    clock.advance(engine.remaining)
    engine._on_tick()
