"""User domain services."""

from knotes_identity.domain.user.services.user_service import UserService

__all__ = ["UserService"]
