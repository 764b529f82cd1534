"""Pytest configuration and fixtures for habitlog tests."""

import os
from datetime import date

import pytest

from habitlog.core.db import MemoryBackend
from habitlog.core.models import HabitDuration
from habitlog.core.tracker import Tracker


@pytest.fixture(autouse=True)
def test_data_env(tmp_path):
    """Set HABITLOG_DIR to a temp directory for each test."""
    test_dir = tmp_path / "habitlog_test"
    test_dir.mkdir()
    old_env = os.environ.get("HABITLOG_DIR")
    os.environ["HABITLOG_DIR"] = str(test_dir)
    yield test_dir
    if old_env is not None:
        os.environ["HABITLOG_DIR"] = old_env
    else:
        del os.environ["HABITLOG_DIR"]


@pytest.fixture
def today():
    """A fixed 'today' so streaks don't depend on the wall clock."""
    return date(2025, 1, 15)


@pytest.fixture
def backend():
    """In-memory key-value backend."""
    return MemoryBackend()


@pytest.fixture
def tracker(backend):
    """Tracker over an in-memory backend."""
    return Tracker(backend)


@pytest.fixture
def habit(tracker):
    """A single-completion habit."""
    return tracker.create_habit("Exercise", start_date=date(2025, 1, 1))


@pytest.fixture
def multi_habit(tracker):
    """A habit needing three completions a day."""
    return tracker.create_habit("Drink water", target_completions_per_day=3, start_date=date(2025, 1, 1))


@pytest.fixture
def fixed_habit(tracker):
    """A ten-day habit starting on Jan 1."""
    return tracker.create_habit(
        "Cold shower",
        duration=HabitDuration.fixed(10),
        start_date=date(2025, 1, 1),
    )
