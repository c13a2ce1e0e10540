"""Value objects for the user domain."""

from knotes_identity.domain.user.value_objects.email import Email
from knotes_identity.domain.user.value_objects.password import (
    MIN_PASSWORD_LENGTH,
    Password,
)

__all__ = [
    "MIN_PASSWORD_LENGTH",
    "Email",
    "Password",
]
