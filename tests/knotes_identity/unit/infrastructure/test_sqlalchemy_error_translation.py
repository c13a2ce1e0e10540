"""Unit tests for how the SQLAlchemy adapters report driver failures."""

from datetime import timedelta
from unittest.mock import Mock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from knotes.domain.shared.exceptions import ErrorCode, RepositoryError
from knotes.domain.shared.time import utc_now
from knotes_identity import User, UserAlreadyExistsError
from knotes_identity.infrastructure.persistence.sqlalchemy import (
    SessionRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)

PG_EMAIL_CONFLICT = (
    'duplicate key value violates unique constraint "ix_users_email"\n'
    "DETAIL:  Key (email)=(subject@users.subject.example.com) already exists."
)
PG_SUBJECT_CONFLICT = (
    'duplicate key value violates unique constraint "ix_users_subject"\n'
    "DETAIL:  Key (subject)=(oidc|alice) already exists."
)


def _session_without_user() -> Mock:
    session = Mock(spec=AsyncSession)
    session.execute.return_value = Mock(scalar_one_or_none=Mock(return_value=None))
    return session


def _integrity_error(message: str) -> IntegrityError:
    return IntegrityError("INSERT INTO users ...", {}, Exception(message))


class TestUserRepositoryConflicts:
    """Tests for telling subject and email clashes apart."""

    def setup_method(self):
        """Set up test fixtures."""
        self.session = _session_without_user()
        self.repo = UserRepositorySQLAlchemy(self.session)
        self.user = User.create("oidc|alice", "subject@users.subject.example.com")

    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            ("UNIQUE constraint failed: users.subject", "oidc|alice"),
            (
                "UNIQUE constraint failed: users.email",
                "subject@users.subject.example.com",
            ),
            (PG_SUBJECT_CONFLICT, "oidc|alice"),
            (PG_EMAIL_CONFLICT, "subject@users.subject.example.com"),
        ],
    )
    async def test_conflict_names_the_clashing_identifier(self, message, expected):
        """Test that the reported identifier follows the violated constraint."""
        self.session.flush.side_effect = _integrity_error(message)

        with pytest.raises(UserAlreadyExistsError) as exc_info:
            await self.repo.save(self.user)

        assert exc_info.value.identifier == expected

    async def test_driver_failure_becomes_repository_error(self):
        """Test that other driver errors surface as RepositoryError."""
        self.session.flush.side_effect = OperationalError(
            "INSERT INTO users ...",
            {},
            Exception("disk I/O error"),
        )

        with pytest.raises(RepositoryError) as exc_info:
            await self.repo.save(self.user)

        assert exc_info.value.code == ErrorCode.REPOSITORY_ERROR


class TestSessionRepositoryFailures:
    """Tests for driver errors raised by the sessions adapter."""

    def setup_method(self):
        """Set up test fixtures."""
        self.session = Mock(spec=AsyncSession)
        self.failure = OperationalError("SELECT ...", {}, Exception("locked"))
        self.session.execute.side_effect = self.failure
        self.session.flush.side_effect = self.failure
        self.repo = SessionRepositorySQLAlchemy(self.session)

    @pytest.mark.parametrize(
        "call",
        [
            lambda repo: repo.find_by_token_hash("hash"),
            lambda repo: repo.touch(uuid4(), utc_now()),
            lambda repo: repo.delete(uuid4()),
            lambda repo: repo.delete_all_for_user(uuid4()),
            lambda repo: repo.cleanup_expired(),
            lambda repo: repo.create(
                uuid4(),
                "hash",
                "auth",
                utc_now() + timedelta(days=1),
            ),
        ],
    )
    async def test_operations_raise_repository_error(self, call):
        """Test that every operation wraps driver errors."""
        with pytest.raises(RepositoryError) as exc_info:
            await call(self.repo)

        assert exc_info.value.code == ErrorCode.REPOSITORY_ERROR
        assert exc_info.value.__cause__ is self.failure
