"""K-Notes Identity - users, authentication and login sessions.

This module handles all identity-related concerns:
- User management and identity resolution (subject/email account linking)
- Local registration and password login
- Server-side login sessions

The rest of K-Notes only references user_id, keeping identity concerns
separated.
"""

from knotes_identity.application.services import (
    AuthenticationService,
    SessionService,
)
from knotes_identity.domain.user import (
    Email,
    InvalidEmailError,
    Password,
    User,
    UserAlreadyExistsError,
    UserNotFoundError,
    UserRepository,
    UserService,
    WeakPasswordError,
)
from knotes_identity.exceptions import (
    InvalidCredentialsError,
    NotAuthenticatedError,
    RegistrationDisabledError,
)
from knotes_identity.repositories import SessionData, SessionRepository
from knotes_identity.services import PasswordHashingService

__all__ = [
    # Domain - User
    "Email",
    "InvalidEmailError",
    "Password",
    "User",
    "UserAlreadyExistsError",
    "UserNotFoundError",
    "UserRepository",
    "UserService",
    "WeakPasswordError",
    # Exceptions
    "InvalidCredentialsError",
    "NotAuthenticatedError",
    "RegistrationDisabledError",
    # Repositories
    "SessionData",
    "SessionRepository",
    # Services
    "PasswordHashingService",
    # Application Services
    "AuthenticationService",
    "SessionService",
]
