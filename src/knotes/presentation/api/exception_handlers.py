"""Translation of domain exceptions into HTTP error responses.

Every error body has the same two keys, ``detail`` (message for humans)
and ``code`` (an ``ErrorCode`` value for clients to branch on).
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from knotes.domain.shared.exceptions import (
    AuthenticationError,
    ConflictError,
    DomainException,
    EntityNotFoundError,
    ErrorCode,
    ForbiddenError,
    RepositoryError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ERROR_CODE_TO_STATUS: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_EMAIL: status.HTTP_400_BAD_REQUEST,
    ErrorCode.WEAK_PASSWORD: status.HTTP_400_BAD_REQUEST,
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.NOT_AUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.REGISTRATION_DISABLED: status.HTTP_403_FORBIDDEN,
    ErrorCode.ENTITY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.USER_ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.REPOSITORY_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Consulted in order when a code has no explicit entry above
_STATUS_BY_TYPE: tuple[tuple[type[DomainException], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (RepositoryError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def _get_status_for_exception(exc: DomainException) -> int:
    """Pick the HTTP status for ``exc``, by error code first, then by type."""
    mapped = ERROR_CODE_TO_STATUS.get(exc.code)
    if mapped is not None:
        return mapped
    for exc_type, status_code in _STATUS_BY_TYPE:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def _error_body(status_code: int, detail: str, code: ErrorCode) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "code": code.value},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Install the domain and catch-all exception handlers on ``app``.

    Parameters
    ----------
    app
        The FastAPI application instance
    """

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        status_code = _get_status_for_exception(exc)
        server_side = status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR

        logger.log(
            logging.ERROR if server_side else logging.WARNING,
            "%s %s failed with %s: %s (details=%s)",
            request.method,
            request.url.path,
            exc.code.value,
            exc.message,
            exc.details,
            exc_info=exc.__cause__ if server_side else None,
        )
        return _error_body(status_code, exc.message, exc.code)

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Last resort for anything the domain handler did not claim."""
        logger.exception(
            "Unhandled %s on %s %s",
            type(exc).__name__,
            request.method,
            request.url.path,
        )
        return _error_body(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An internal error occurred",
            ErrorCode.INTERNAL_ERROR,
        )
