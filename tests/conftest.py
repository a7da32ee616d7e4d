"""Pytest configuration and fixtures."""

import tempfile
from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from fit_tracker.config import Settings
from fit_tracker.models.challenge import Challenge
from fit_tracker.models.exercise_record import ExerciseRecord
from fit_tracker.web import create_app


@pytest.fixture
def temp_data_dir():
    """Create a temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_db_path(temp_data_dir):
    """Database path inside the temporary data directory."""
    return temp_data_dir / "test.db"


@pytest.fixture
def settings(temp_data_dir):
    """Settings pointing at the temporary data directory."""
    return Settings(data_dir=temp_data_dir, cors_origins=["http://localhost:3000"])


@pytest.fixture
def client(settings):
    """Test client with the lifespan (schema creation) run."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def make_user(client):
    """Sign up a user through the API and return its id."""

    def _make_user(username: str, password: str = "secret123", name: str | None = None) -> int:
        response = client.post(
            "/api/auth/signup",
            json={"username": username, "password": password, "name": name},
        )
        assert response.status_code == 201, response.text
        return response.json()["userId"]

    return _make_user


@pytest.fixture
def sample_challenge():
    """Three-day challenge with only a weight target."""
    return Challenge(
        id=1,
        user_id=1,
        name="January cut",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 3),
        target_weight=70.0,
    )


@pytest.fixture
def sample_records():
    """Weight recorded on the first and last day, nothing on the second."""
    return {
        date(2024, 1, 1): ExerciseRecord(user_id=1, record_date=date(2024, 1, 1), weight=72.0),
        date(2024, 1, 3): ExerciseRecord(user_id=1, record_date=date(2024, 1, 3), weight=69.0),
    }
