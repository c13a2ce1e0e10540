"""Application services for identity management."""

from knotes_identity.application.services.authentication_service import (
    AuthenticationService,
)
from knotes_identity.application.services.session_service import SessionService

__all__ = ["AuthenticationService", "SessionService"]
