"""
Test configuration: ensures repo root is in sys.path.

This allows tests to import the top-level autofit package without installing it.
Every test passes "now" explicitly; nothing here reads the wall clock.
"""

import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from autofit.models import Settings, Task, WorkingHoursRange  # noqa: E402


@pytest.fixture
def make_settings():
    """Factory for Settings with test-friendly defaults."""

    def _make(working_hours=(("09:00", "17:00"),), **overrides):
        values = {
            "default_task_duration": 30,
            "working_hours": [WorkingHoursRange(s, e) for s, e in working_hours],
            "min_time_between_tasks": 15,
            "slot_min_time": "06:00",
            "slot_max_time": "22:00",
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def make_tasks():
    """Factory for N undated tasks with ids task-1..task-N."""

    def _make(count: int):
        return [Task(id=f"task-{i}", title=f"Task {i}") for i in range(1, count + 1)]

    return _make


@pytest.fixture
def past_now():
    """A 'now' well before every test date, so no past-time trimming applies."""
    return datetime(2025, 1, 1, 12, 0, tzinfo=UTC)
