"""
Pytest configuration and fixtures for auth gateway tests.
"""

import os
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set test environment variables before importing modules
os.environ["LOG_TO_FILE"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SUPABASE_URL"] = "https://default.supabase.test/"
os.environ["SUPABASE_ANON_KEY"] = "anon-default"
os.environ["SUPABASE_SERVICE_ROLE_KEY"] = ""
os.environ["BASE_URL"] = "https://gateway.example.com"
os.environ["STATIC_DIR"] = "__no_static_dir__"


@pytest.fixture
def sample_email() -> str:
    return "ada@example.com"


@pytest.fixture
def sample_session() -> Dict[str, Any]:
    return {
        "access_token": "access-abc",
        "refresh_token": "refresh-xyz",
        "token_type": "bearer",
        "expires_in": 3600,
    }


@pytest.fixture
def sample_user(sample_email) -> Dict[str, Any]:
    return {
        "id": "8d0fd2b3-0000-4000-8000-000000000001",
        "email": sample_email,
        "user_metadata": {"name": "Ada"},
        "identities": [{"provider": "email"}],
    }


@pytest.fixture
def mock_backend(sample_user, sample_session):
    """Return a mock backend client with successful default responses."""
    mock = MagicMock()
    mock.sign_up = AsyncMock(return_value={"user": sample_user, "session": None})
    mock.verify_otp = AsyncMock(return_value={"user": sample_user, "session": sample_session})
    mock.sign_in_with_otp = AsyncMock(
        return_value={"user": None, "session": None, "message_id": "msg-1"}
    )
    mock.sign_in_with_password = AsyncMock(
        return_value={"user": sample_user, "session": sample_session}
    )
    mock.sign_in_with_oauth = AsyncMock(
        return_value={"provider": "google", "url": "https://default.supabase.test/auth/v1/authorize"}
    )
    mock.reset_password_for_email = AsyncMock(return_value=None)
    mock.set_session = AsyncMock(return_value={"user": sample_user, "session": sample_session})
    mock.update_user = AsyncMock(return_value={"user": sample_user})
    mock.get_user = AsyncMock(return_value={"user": sample_user})
    # async with backend: yields itself, never swallows errors
    mock.__aenter__.return_value = mock
    mock.__aexit__.return_value = False
    return mock


@pytest.fixture
def mock_factory(mock_backend, sample_user):
    """Return a mock backend factory that always hands out mock_backend."""
    mock = MagicMock()
    mock.create = AsyncMock(return_value=mock_backend)
    mock.lookup_user_by_email = AsyncMock(return_value={"users": [sample_user]})
    mock.check_health = AsyncMock(
        return_value={
            "connected": True,
            "status_code": 200,
            "body": {"name": "GoTrue", "version": "v2"},
            "error": None,
        }
    )
    return mock


@pytest.fixture
def app():
    from services.auth_gateway.main import app as gateway_app

    yield gateway_app
    gateway_app.dependency_overrides.clear()


@pytest.fixture
def client(app, mock_factory):
    """TestClient with the backend factory replaced by mock_factory."""
    from fastapi.testclient import TestClient

    from services.auth_gateway.api.dependencies import get_backend_factory

    app.dependency_overrides[get_backend_factory] = lambda: mock_factory
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
