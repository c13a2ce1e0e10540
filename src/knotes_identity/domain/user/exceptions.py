"""User domain exceptions.

Custom exceptions for the user domain, used for validation
and business rule violations.
"""

from uuid import UUID

from knotes.domain.shared.exceptions import (
    ConflictError,
    EntityNotFoundError,
    ErrorCode,
    ValidationError,
)


class InvalidEmailError(ValidationError):
    """
    Raised when email format is invalid.

    This exception is raised during Email value object creation
    when the provided string doesn't match expected email format.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message, code=ErrorCode.INVALID_EMAIL)


class WeakPasswordError(ValidationError):
    """Raised when a password doesn't meet length requirements."""

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message, code=ErrorCode.WEAK_PASSWORD)


class UserAlreadyExistsError(ConflictError):
    """A user with this email or subject already exists."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(
            f"User already exists: {identifier}",
            code=ErrorCode.USER_ALREADY_EXISTS,
        )


class UserNotFoundError(EntityNotFoundError):
    """User not found."""

    def __init__(self, user_id: UUID | str) -> None:
        self.user_id = user_id
        super().__init__(
            f"User not found: {user_id}",
            code=ErrorCode.USER_NOT_FOUND,
        )
