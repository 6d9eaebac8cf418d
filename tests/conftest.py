"""Pytest configuration and shared fixtures for sleep module tests."""

from datetime import date, datetime, timedelta

import pytest

from healthmate_sleep.core.models.data_models import SleepGoals, SleepSession
from healthmate_sleep.core.repositories.sleep_repository import SleepRepository
from healthmate_sleep.core.scoring.sleep_calculator import calculate_automatic_quality
from healthmate_sleep.utils.time_utils import overnight_duration, parse_clock

# Tuesday evening
NOW = datetime(2024, 4, 30, 21, 0)
TODAY = NOW.date()


def build_session(
    session_date,
    bedtime="23:00",
    wake_time="07:00",
    efficiency=85.0,
    quality=None,
    session_id=None,
    notes=None,
):
    """Build a stored-style session with explicit metrics."""
    if isinstance(session_date, str):
        session_date = date.fromisoformat(session_date)
    duration = overnight_duration(parse_clock(bedtime), parse_clock(wake_time))
    return SleepSession(
        id=session_id or f"session-{session_date.isoformat()}",
        date=session_date,
        bedtime=bedtime,
        wake_time=wake_time,
        duration=duration,
        quality=quality if quality is not None else calculate_automatic_quality(duration),
        sleep_efficiency=efficiency,
        notes=notes,
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_session():
    return build_session


@pytest.fixture
def week_of_sessions():
    """Seven nights of eight hours ending today, most recent first."""
    return [build_session(TODAY - timedelta(days=offset), efficiency=94.0) for offset in range(7)]


@pytest.fixture
def goals():
    return SleepGoals()


@pytest.fixture
def repository(tmp_path):
    return SleepRepository(data_dir=str(tmp_path / "sleep"))
