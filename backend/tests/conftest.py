"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from api.dependencies import reset_container
from modules.auth.mailer import MagicLinkMailer
from modules.auth.service import AuthService
from shared.config import Settings
from shared.database import reset_client_cache

from tests.factories import (
    InMemoryMagicTokenStore,
    InMemoryUserStore,
    create_test_token,
    make_settings,
)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the service container and database client before and after each test."""
    reset_container()
    reset_client_cache()
    yield
    reset_container()
    reset_client_cache()


@pytest.fixture
def settings() -> Settings:
    """Settings with fake secrets."""
    return make_settings()


@pytest.fixture
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def token_store() -> InMemoryMagicTokenStore:
    return InMemoryMagicTokenStore()


@pytest.fixture
def mailer() -> MagicMock:
    """A mailer whose sends always succeed."""
    mock = MagicMock(spec=MagicLinkMailer)
    mock.send_magic_link = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def auth_service(settings, user_store, token_store, mailer) -> AuthService:
    """AuthService wired to in-memory stores."""
    return AuthService(
        settings=settings,
        users=user_store,
        tokens=token_store,
        mailer=mailer,
    )


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"


@pytest.fixture
def auth_token(test_user_email: str) -> str:
    """Create a valid session token for testing."""
    return create_test_token(user_id=1, email=test_user_email)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}
