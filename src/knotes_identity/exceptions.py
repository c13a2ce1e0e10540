"""Authentication and session exceptions.

These exceptions are raised by the knotes_identity application services
and mapped to HTTP responses by the presentation layer.
"""

from knotes.domain.shared.exceptions import (
    AuthenticationError,
    ErrorCode,
    ForbiddenError,
)


class InvalidCredentialsError(AuthenticationError):
    """Raised when email or password is incorrect during login.

    Covers every failure cause (unknown email, no local password, wrong
    password) so callers cannot tell them apart.
    """

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code=ErrorCode.INVALID_CREDENTIALS)


class NotAuthenticatedError(AuthenticationError):
    """Raised when a request carries no valid session."""

    def __init__(self, message: str = "Not logged in"):
        super().__init__(message, code=ErrorCode.NOT_AUTHENTICATED)


class RegistrationDisabledError(ForbiddenError):
    """Raised when self-service registration is switched off."""

    def __init__(self, message: str = "Registration is disabled"):
        super().__init__(message, code=ErrorCode.REGISTRATION_DISABLED)
