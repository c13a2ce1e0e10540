"""
Pytest configuration for knotes_identity tests.

This conftest provides fixtures specific to the identity domain
(users, authentication, sessions).
"""

import pytest

from knotes_identity import PasswordHashingService, User
from knotes_identity.infrastructure.persistence.memory import InMemoryUserRepository

TEST_SUBJECT = "oidc|alice"
TEST_EMAIL = "alice@example.com"
TEST_PASSWORD = "secure_password_123"


@pytest.fixture
def test_user() -> User:
    """Create a standard test user without a password."""
    return User.create(TEST_SUBJECT, TEST_EMAIL)


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    """Fresh in-memory user store."""
    return InMemoryUserRepository()


@pytest.fixture
def password_service() -> PasswordHashingService:
    """Real bcrypt hashing at the lowest work factor to keep tests fast."""
    return PasswordHashingService(rounds=4)
