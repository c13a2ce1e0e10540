"""Pytest fixtures for API integration tests."""

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from knotes.presentation.api.app import API_V1_PREFIX, create_app
from knotes_config.settings import Settings


@pytest.fixture
def api_v1_prefix() -> str:
    """Get the API v1 prefix for building URLs."""
    return API_V1_PREFIX


@pytest.fixture
def api_settings(tmp_path) -> Settings:
    """Test API settings backed by a throwaway SQLite file."""
    return Settings(
        session_secret=SecretStr("test-session-secret-for-testing-only"),
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        api_debug=True,
        api_cors_origins="http://localhost:3000",
        api_cookie_secure=False,  # Allow HTTP in tests
        password_hash_rounds=4,
        _env_file=None,
    )


@pytest.fixture
def test_client(api_settings) -> TestClient:
    """Create a test client; the lifespan creates the schema."""
    app = create_app(settings=api_settings)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def registered_user_data() -> dict:
    """Test user registration data."""
    return {
        "email": "test@example.com",
        "password": "SecurePassword123!",
    }


@pytest.fixture
def registered_client(test_client, registered_user_data, api_v1_prefix) -> TestClient:
    """A client that has registered and therefore holds a session cookie."""
    response = test_client.post(
        f"{api_v1_prefix}/auth/register",
        json=registered_user_data,
    )
    assert response.status_code == 201
    return test_client
