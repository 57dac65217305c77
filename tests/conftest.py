"""Shared fixtures for tests."""

from __future__ import annotations

import os
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import Generator

import pytest

# Set up test database before importing storage
_test_db_fd, _test_db_path = tempfile.mkstemp(suffix=".db")
os.environ["WEEKLY_TRACKER_DB"] = _test_db_path


class FakeClock:
    """Controllable stand-in for datetime.now."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class FakeTimer:
    """Handle returned by fake_set_interval."""

    def __init__(self, interval: float, callback):
        self.interval = interval
        self.callback = callback
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True


@pytest.fixture(scope="session", autouse=True)
def setup_test_db() -> Generator[Path, None, None]:
    """Set up a test database for the entire test session."""
    import storage

    storage.DB_PATH = Path(_test_db_path)
    storage.init_db()

    yield Path(_test_db_path)

    os.close(_test_db_fd)
    os.unlink(_test_db_path)


@pytest.fixture
def monday_morning() -> datetime:
    """Monday 26 Jan 2026, 09:00."""
    return datetime(2026, 1, 26, 9, 0)


@pytest.fixture
def clock(monday_morning) -> FakeClock:
    return FakeClock(monday_morning)


@pytest.fixture
def repository():
    from storage import InMemoryLedgerRepository

    return InMemoryLedgerRepository()


@pytest.fixture
def tracker(repository, clock):
    """A tracker over an in-memory repository, already loaded."""
    from tracker import WeeklyTracker

    t = WeeklyTracker(repository, clock=clock)
    t.load()
    return t


@pytest.fixture
def timers() -> list[FakeTimer]:
    return []


@pytest.fixture
def fake_set_interval(timers):
    """Timer factory with the same shape as App.set_interval."""

    def set_interval(interval, callback):
        timer = FakeTimer(interval, callback)
        timers.append(timer)
        return timer

    return set_interval


@pytest.fixture
def sample_session():
    """A 09:00-17:30 session on Monday 26 Jan 2026."""
    from models import WorkSession

    return WorkSession(
        start_time=datetime(2026, 1, 26, 9, 0),
        end_time=datetime(2026, 1, 26, 17, 30),
        duration_minutes=510,
    )


@pytest.fixture
def sample_ledger(sample_session):
    """Ledger with two days logged and a session running."""
    from models import ActiveSession, DailyEntry, WeekLedger, WorkSession

    return WeekLedger(
        last_reset=datetime(2026, 1, 26, 0, 5),
        entries=[
            DailyEntry(
                date_key="2026-01-26",
                display_label="Monday, Jan 26",
                sessions=[sample_session],
            ),
            DailyEntry(
                date_key="2026-01-27",
                display_label="Tuesday, Jan 27",
                sessions=[
                    WorkSession(
                        start_time=datetime(2026, 1, 27, 8, 0),
                        end_time=datetime(2026, 1, 27, 12, 0),
                        duration_minutes=240,
                    ),
                    WorkSession(
                        start_time=datetime(2026, 1, 27, 18, 0),
                        end_time=datetime(2026, 1, 27, 18, 0),
                        duration_minutes=120,
                    ),
                ],
            ),
        ],
        session=ActiveSession(start_time=datetime(2026, 1, 28, 8, 30)),
    )
