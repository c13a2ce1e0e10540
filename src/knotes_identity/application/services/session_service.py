"""Server-side login sessions referenced by an opaque cookie token."""

import hashlib
import hmac
import logging
import secrets
from datetime import timedelta

from knotes.domain.shared.time import utc_now
from knotes_identity.domain.user import User, UserRepository
from knotes_identity.repositories import SessionRepository

logger = logging.getLogger(__name__)


class SessionService:
    """Service for starting, resolving and ending login sessions.

    Only a keyed hash of each token is stored, so a leaked sessions table
    cannot be replayed without the secret. Sessions expire after a period
    of inactivity and die with the credentials they were opened under.
    """

    TOKEN_BYTES = 32
    DEFAULT_EXPIRY_DAYS = 7

    def __init__(
        self,
        session_repository: SessionRepository,
        user_repository: UserRepository,
        secret_key: str,
        expiry_days: int = DEFAULT_EXPIRY_DAYS,
    ):
        self._session_repo = session_repository
        self._user_repo = user_repository
        self._secret_key = secret_key.encode("utf-8")
        self._expiry = timedelta(days=expiry_days)

    @property
    def max_age_seconds(self) -> int:
        return int(self._expiry.total_seconds())

    def _hash_token(self, raw_token: str) -> str:
        return hmac.new(
            self._secret_key,
            raw_token.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

    @staticmethod
    def _auth_hash(user: User) -> str:
        if user.password_hash is None:
            return ""
        return hashlib.sha256(user.password_hash.encode("utf-8")).hexdigest()

    async def start(self, user: User) -> str:
        raw_token = secrets.token_urlsafe(self.TOKEN_BYTES)
        await self._session_repo.create(
            user_id=user.id,
            token_hash=self._hash_token(raw_token),
            auth_hash=self._auth_hash(user),
            expires_at=utc_now() + self._expiry,
        )
        logger.info("Session started for user: %s", user.id)
        return raw_token

    async def resolve(self, raw_token: str) -> User | None:
        session = await self._session_repo.find_by_token_hash(
            self._hash_token(raw_token),
        )
        if session is None:
            return None

        now = utc_now()
        if session.is_expired(now):
            await self._session_repo.delete(session.id)
            logger.debug("Discarded expired session for user: %s", session.user_id)
            return None

        user = await self._user_repo.find_by_id(session.user_id)
        if user is None:
            await self._session_repo.delete(session.id)
            logger.warning("Discarded session of deleted user: %s", session.user_id)
            return None

        if not hmac.compare_digest(session.auth_hash, self._auth_hash(user)):
            await self._session_repo.delete(session.id)
            logger.warning(
                "Discarded session after credential change for user: %s",
                user.id,
            )
            return None

        await self._session_repo.touch(session.id, now + self._expiry)
        return user

    async def end(self, raw_token: str) -> None:
        session = await self._session_repo.find_by_token_hash(
            self._hash_token(raw_token),
        )
        if session is None:
            return
        await self._session_repo.delete(session.id)
        logger.info("Session ended for user: %s", session.user_id)

    async def end_all(self, user: User) -> int:
        removed = await self._session_repo.delete_all_for_user(user.id)
        logger.info("Ended %d session(s) for user: %s", removed, user.id)
        return removed

    async def purge_expired(self) -> int:
        removed = await self._session_repo.cleanup_expired()
        if removed:
            logger.info("Purged %d expired session(s)", removed)
        return removed
