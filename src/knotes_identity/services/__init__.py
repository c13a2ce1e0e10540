"""Identity services - password hashing."""

from knotes_identity.services.password_service import PasswordHashingService

__all__ = ["PasswordHashingService"]
