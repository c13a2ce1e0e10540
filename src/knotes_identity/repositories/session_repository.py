"""Abstract repository interface for login sessions."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from knotes.domain.shared.time import ensure_tz_aware


@dataclass(frozen=True)
class SessionData:
    """Immutable login session data."""

    id: UUID
    user_id: UUID
    token_hash: str
    auth_hash: str
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Check if the session has expired; naive expiries are read as UTC."""
        return now >= ensure_tz_aware(self.expires_at)


class SessionRepository(ABC):
    """Abstract repository for server-side login sessions."""

    @abstractmethod
    async def create(
        self,
        user_id: UUID,
        token_hash: str,
        auth_hash: str,
        expires_at: datetime,
    ) -> SessionData:
        """Create a new session.

        Parameters
        ----------
        user_id
            The user's unique identifier
        token_hash
            Keyed hash of the raw session token
        auth_hash
            Fingerprint of the user's credentials at login time
        expires_at
            When the session expires unless it is used again

        Returns
        -------
        The stored session
        """

    @abstractmethod
    async def find_by_token_hash(self, token_hash: str) -> SessionData | None:
        """Find a session by its token hash, expired or not."""

    @abstractmethod
    async def touch(self, session_id: UUID, expires_at: datetime) -> None:
        """Move a session's expiry forward."""

    @abstractmethod
    async def delete(self, session_id: UUID) -> None:
        """Delete a single session."""

    @abstractmethod
    async def delete_all_for_user(self, user_id: UUID) -> int:
        """Delete every session of a user. Returns the number removed."""

    @abstractmethod
    async def cleanup_expired(self) -> int:
        """Delete expired sessions. Returns the number removed."""
