"""User domain manages user identity.

This domain handles:
- User aggregate (id, subject, email, optional password hash)
- Email and Password value objects
- The UserRepository port
- Identity resolution and account linking (UserService)
"""

from knotes_identity.domain.user.aggregates import LOCAL_SUBJECT_PREFIX, User
from knotes_identity.domain.user.exceptions import (
    InvalidEmailError,
    UserAlreadyExistsError,
    UserNotFoundError,
    WeakPasswordError,
)
from knotes_identity.domain.user.repositories import UserRepository
from knotes_identity.domain.user.services import UserService
from knotes_identity.domain.user.value_objects import (
    MIN_PASSWORD_LENGTH,
    Email,
    Password,
)

__all__ = [
    "LOCAL_SUBJECT_PREFIX",
    "MIN_PASSWORD_LENGTH",
    "Email",
    "InvalidEmailError",
    "Password",
    "User",
    "UserAlreadyExistsError",
    "UserNotFoundError",
    "UserRepository",
    "UserService",
    "WeakPasswordError",
]
