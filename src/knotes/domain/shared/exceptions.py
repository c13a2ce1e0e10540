"""Error codes and the exception hierarchy shared by every bounded context.

Anything raised from the domain or application layer derives from
``DomainException``; the API maps ``code`` to an HTTP status and the CLI
prints it.
"""

from enum import Enum
from typing import Any, ClassVar


class ErrorCode(str, Enum):
    """Machine-readable error codes. Clients branch on these; never rename."""

    # 400
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_EMAIL = "INVALID_EMAIL"
    WEAK_PASSWORD = "WEAK_PASSWORD"

    # 401
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"

    # 403
    FORBIDDEN = "FORBIDDEN"
    REGISTRATION_DISABLED = "REGISTRATION_DISABLED"

    # 404
    ENTITY_NOT_FOUND = "ENTITY_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # 409
    CONFLICT = "CONFLICT"
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"

    # 500
    REPOSITORY_ERROR = "REPOSITORY_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class DomainException(Exception):  # NOQA: N818
    """Root of the domain error hierarchy.

    Subclasses set ``default_code`` and, where a generic wording makes
    sense, ``default_message``; both can be overridden per instance.

    Attributes
    ----------
    message
        Text that is safe to show to the end user
    code
        The ``ErrorCode`` reported to clients
    details
        Extra context for logs; never sent to clients
    """

    default_code: ClassVar[ErrorCode] = ErrorCode.INTERNAL_ERROR
    default_message: ClassVar[str] = "An internal error occurred"

    def __init__(
        self,
        message: str | None = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message if message is not None else self.default_message
        self.code = code if code is not None else self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.message!r}, "
            f"code={self.code.value}, details={self.details!r})"
        )


class ValidationError(DomainException):
    default_code = ErrorCode.VALIDATION_ERROR
    default_message = "Invalid input"


class AuthenticationError(DomainException):
    default_code = ErrorCode.UNAUTHORIZED
    default_message = "Authentication required"


class ForbiddenError(DomainException):
    default_code = ErrorCode.FORBIDDEN
    default_message = "Operation not permitted"


class EntityNotFoundError(DomainException):
    default_code = ErrorCode.ENTITY_NOT_FOUND
    default_message = "Not found"


class ConflictError(DomainException):
    default_code = ErrorCode.CONFLICT
    default_message = "Conflicts with existing data"


class RepositoryError(DomainException):
    """The store failed.

    The message stays generic; the driver error is kept in ``details`` and
    as ``__cause__`` for logging.
    """

    default_code = ErrorCode.REPOSITORY_ERROR
    default_message = "A storage error occurred"
