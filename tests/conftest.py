"""
Shared fixtures: every test gets its own app built against a throwaway
SQLite file, so tests never see each other's rows.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from bulklog.main import create_app
from bulklog.settings import Settings


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "bulklog-test.db"


@pytest.fixture
def settings(db_path):
    return Settings(
        database_url=f"sqlite:///{db_path}",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        log_level="WARNING",
        _env_file=None,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sync_engine(db_path, client):
    """Plain synchronous engine on the same file, for inspecting raw rows."""
    engine = create_engine(f"sqlite:///{db_path}")
    yield engine
    engine.dispose()


@pytest.fixture
def sample_user_data():
    return {"name": "Dana Lift", "email": "Dana@Example.com ", "password": "squat-heavy-1"}


@pytest.fixture
def sample_profile_data():
    return {"bodyWeightKg": 82.5, "heightCm": 180, "muscleWeightKg": 38.2, "fatPercentage": 18.4}


@pytest.fixture
def registered(client, sample_user_data):
    response = client.post("/api/auth/register", json=sample_user_data)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def auth_headers(registered):
    return {"Authorization": f"Bearer {registered['token']}"}


@pytest.fixture
def anyio_backend():
    return "asyncio"
