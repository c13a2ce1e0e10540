"""Unit tests for SessionService."""

from dataclasses import replace
from datetime import timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from knotes.domain.shared.time import utc_now
from knotes_identity import (
    SessionData,
    SessionRepository,
    SessionService,
    User,
    UserRepository,
)

SECRET = "unit-test-session-secret"


def _session_for(user: User, token_hash: str, auth_hash: str, expires_in: timedelta):
    now = utc_now()
    return SessionData(
        id=uuid4(),
        user_id=user.id,
        token_hash=token_hash,
        auth_hash=auth_hash,
        expires_at=now + expires_in,
        created_at=now,
    )


class TestSessionData:
    """Tests for the expiry check on stored sessions."""

    def setup_method(self):
        """Set up test fixtures."""
        self.user = User.create_local("a@example.com", "$2b$04$hash")

    @pytest.mark.parametrize(
        ("expires_in", "expired"),
        [
            (timedelta(minutes=5), False),
            (timedelta(0), True),
            (timedelta(minutes=-5), True),
        ],
    )
    def test_is_expired(self, expires_in, expired):
        """Test that a session is expired from its expiry instant on."""
        session = _session_for(self.user, "t", "a", expires_in)

        assert session.is_expired(session.created_at) is expired

    def test_is_expired_accepts_naive_expiry(self):
        """Test that a naive expiry is compared as UTC."""
        session = _session_for(self.user, "t", "a", timedelta(minutes=-5))
        naive = replace(session, expires_at=session.expires_at.replace(tzinfo=None))

        assert naive.is_expired(utc_now()) is True


class TestSessionServiceStart:
    """Tests for opening sessions."""

    def setup_method(self):
        """Set up test fixtures."""
        self.session_repo = AsyncMock(spec=SessionRepository)
        self.user_repo = AsyncMock(spec=UserRepository)
        self.service = SessionService(self.session_repo, self.user_repo, SECRET)
        self.user = User.create_local("a@example.com", "$2b$04$hash")

    async def test_start_stores_only_token_hash(self):
        """Test that the raw token never reaches the store."""
        # Act
        token = await self.service.start(self.user)

        # Assert
        kwargs = self.session_repo.create.await_args.kwargs
        assert kwargs["user_id"] == self.user.id
        assert kwargs["token_hash"] != token
        assert token not in kwargs.values()
        assert len(kwargs["token_hash"]) == 64

    async def test_start_sets_expiry(self):
        """Test that sessions expire after the configured days."""
        before = utc_now()

        await self.service.start(self.user)

        expires_at = self.session_repo.create.await_args.kwargs["expires_at"]
        assert before + timedelta(days=7) <= expires_at
        assert expires_at <= utc_now() + timedelta(days=7)

    async def test_tokens_are_unique(self):
        """Test that every session gets a fresh token."""
        first = await self.service.start(self.user)
        second = await self.service.start(self.user)

        assert first != second

    async def test_passwordless_user_has_empty_fingerprint(self):
        """Test that users without a password get an empty auth hash."""
        await self.service.start(User.create("oidc|x", "x@example.com"))

        assert self.session_repo.create.await_args.kwargs["auth_hash"] == ""

    def test_max_age_matches_expiry(self):
        """Test that the cookie max-age mirrors the expiry period."""
        service = SessionService(
            self.session_repo,
            self.user_repo,
            SECRET,
            expiry_days=2,
        )

        assert service.max_age_seconds == 2 * 24 * 60 * 60


class TestSessionServiceResolve:
    """Tests for looking sessions up."""

    def setup_method(self):
        """Set up test fixtures."""
        self.session_repo = AsyncMock(spec=SessionRepository)
        self.user_repo = AsyncMock(spec=UserRepository)
        self.service = SessionService(self.session_repo, self.user_repo, SECRET)
        self.user = User.create_local("a@example.com", "$2b$04$hash")

    async def _start(
        self,
        expires_in: timedelta = timedelta(days=7),
    ) -> tuple[str, SessionData]:
        token = await self.service.start(self.user)
        kwargs = self.session_repo.create.await_args.kwargs
        session = _session_for(
            self.user,
            kwargs["token_hash"],
            kwargs["auth_hash"],
            expires_in,
        )
        self.session_repo.find_by_token_hash.return_value = session
        return token, session

    async def test_resolve_live_session(self):
        """Test that a live session yields its user and slides expiry."""
        # Arrange
        token, session = await self._start()
        self.user_repo.find_by_id.return_value = self.user

        # Act
        user = await self.service.resolve(token)

        # Assert
        assert user == self.user
        self.session_repo.touch.assert_awaited_once()
        assert self.session_repo.touch.await_args.args[0] == session.id
        self.session_repo.delete.assert_not_called()

    async def test_resolve_unknown_token(self):
        """Test that an unknown token yields None."""
        self.session_repo.find_by_token_hash.return_value = None

        assert await self.service.resolve("bogus") is None

    async def test_resolve_expired_session_is_deleted(self):
        """Test that expired sessions are removed and rejected."""
        token, session = await self._start(expires_in=timedelta(seconds=-1))

        assert await self.service.resolve(token) is None
        self.session_repo.delete.assert_awaited_once_with(session.id)
        self.user_repo.find_by_id.assert_not_called()

    async def test_resolve_naive_expiry_is_read_as_utc(self):
        """Test that an expiry without tzinfo, as SQLite returns it, still expires."""
        token, session = await self._start(expires_in=timedelta(seconds=-1))
        self.session_repo.find_by_token_hash.return_value = replace(
            session,
            expires_at=session.expires_at.replace(tzinfo=None),
        )

        assert await self.service.resolve(token) is None
        self.session_repo.delete.assert_awaited_once_with(session.id)

    async def test_resolve_session_of_deleted_user(self):
        """Test that sessions outliving their user are removed."""
        token, session = await self._start()
        self.user_repo.find_by_id.return_value = None

        assert await self.service.resolve(token) is None
        self.session_repo.delete.assert_awaited_once_with(session.id)

    async def test_resolve_after_password_change(self):
        """Test that changing the password invalidates existing sessions."""
        token, session = await self._start()
        self.user.set_password_hash("$2b$04$other-hash")
        self.user_repo.find_by_id.return_value = self.user

        assert await self.service.resolve(token) is None
        self.session_repo.delete.assert_awaited_once_with(session.id)

    async def test_token_hash_depends_on_secret(self):
        """Test that a different secret cannot resolve the same token."""
        token, _ = await self._start()
        other = SessionService(self.session_repo, self.user_repo, "another-secret")
        self.session_repo.find_by_token_hash.reset_mock()
        self.session_repo.find_by_token_hash.return_value = None

        await other.resolve(token)

        looked_up = self.session_repo.find_by_token_hash.await_args.args[0]
        assert looked_up != self.session_repo.create.await_args.kwargs["token_hash"]


class TestSessionServiceEnd:
    """Tests for closing sessions."""

    def setup_method(self):
        """Set up test fixtures."""
        self.session_repo = AsyncMock(spec=SessionRepository)
        self.user_repo = AsyncMock(spec=UserRepository)
        self.service = SessionService(self.session_repo, self.user_repo, SECRET)
        self.user = User.create("oidc|x", "x@example.com")

    async def test_end_deletes_session(self):
        """Test that ending a session removes it."""
        session = _session_for(self.user, "h", "", timedelta(days=1))
        self.session_repo.find_by_token_hash.return_value = session

        await self.service.end("token")

        self.session_repo.delete.assert_awaited_once_with(session.id)

    async def test_end_unknown_session_is_noop(self):
        """Test that ending twice does not fail."""
        self.session_repo.find_by_token_hash.return_value = None

        await self.service.end("token")

        self.session_repo.delete.assert_not_called()

    async def test_end_all(self):
        """Test that all sessions of a user are removed."""
        self.session_repo.delete_all_for_user.return_value = 3

        assert await self.service.end_all(self.user) == 3
        self.session_repo.delete_all_for_user.assert_awaited_once_with(self.user.id)

    @pytest.mark.parametrize("removed", [0, 5])
    async def test_purge_expired(self, removed):
        """Test that purge reports the number of removed sessions."""
        self.session_repo.cleanup_expired.return_value = removed

        assert await self.service.purge_expired() == removed
