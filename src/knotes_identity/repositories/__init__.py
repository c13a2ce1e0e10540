"""Repository interfaces for identity persistence outside the User aggregate."""

from knotes_identity.repositories.session_repository import (
    SessionData,
    SessionRepository,
)

__all__ = [
    "SessionData",
    "SessionRepository",
]
