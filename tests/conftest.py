"""Pytest configuration and fixtures."""

import asyncio
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from vital_log.config import AppConfig, SessionConfig, StorageConfig, get_config
from vital_log.models.exercises import ExerciseSet, ExerciseType
from vital_log.models.profile import UserProfile
from vital_log.models.readings import BloodPressureReading
from vital_log.models.sessions import ExerciseSession, MeasurementSession, WorkoutSession
from vital_log.services.events import EventBus
from vital_log.services.tracker import HealthTracker
from vital_log.store import LocalStore, init_db

NOW = datetime(2024, 6, 15, 12, 0, 0)


def make_session(
    start_time: datetime,
    readings: list[tuple[int, int, int | None]],
    completed: bool = True,
) -> MeasurementSession:
    """Build a history session with readings stamped at its start time."""
    session = MeasurementSession(start_time=start_time)
    session.readings = [
        BloodPressureReading(systolic=s, diastolic=d, heart_rate=hr, timestamp=start_time)
        for s, d, hr in readings
    ]
    if completed:
        session.end_time = start_time + timedelta(minutes=5)
    return session


def make_workout(
    start_time: datetime,
    exercise_type: ExerciseType,
    sets: list[tuple[int | None, float | None]],
) -> WorkoutSession:
    """Build a completed workout with one exercise."""
    exercise = ExerciseSession(
        exercise_type=exercise_type,
        sets=[ExerciseSet(reps=r, weight=w, timestamp=start_time) for r, w in sets],
        start_time=start_time,
    )
    return WorkoutSession(
        exercise_sessions=[exercise],
        start_time=start_time,
        end_time=start_time + timedelta(hours=1),
        is_completed=True,
    )


@pytest.fixture
def temp_dir():
    """Create a temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def db_path(temp_dir):
    """Create an initialized database."""
    path = temp_dir / "test.db"
    asyncio.run(init_db(path))
    return path


@pytest.fixture
def store(db_path):
    return LocalStore(db_path)


@pytest.fixture
def events():
    return EventBus()


@pytest.fixture
def tracker(store, events):
    """Create a tracker over an empty store with default policies."""
    return HealthTracker(store, SessionConfig(), events)


@pytest.fixture
def app_config(temp_dir):
    """Create a configuration rooted in the temporary directory."""
    return AppConfig(storage=StorageConfig(data_dir=temp_dir))


@pytest.fixture
def cli_env(temp_dir, monkeypatch):
    """Point the cached configuration at the temporary directory."""
    monkeypatch.setenv("VITAL_LOG_DATA_DIR", str(temp_dir))
    monkeypatch.delenv("VITAL_LOG_MAX_READINGS", raising=False)
    monkeypatch.delenv("VITAL_LOG_AUTO_START", raising=False)
    monkeypatch.delenv("VITAL_LOG_REMOTE_URL", raising=False)
    get_config.cache_clear()
    yield temp_dir
    get_config.cache_clear()


@pytest.fixture
def sample_profile():
    """Create a sample user profile for testing."""
    return UserProfile(
        id="user-1",
        email="test@example.com",
        display_name="Test User",
        created_at=NOW - timedelta(days=30),
        last_updated=NOW,
    )
