"""Shared domain components.

This module exports the exception hierarchy and time helpers used across
domain boundaries.
"""

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
from knotes.domain.shared.time import ensure_tz_aware, utc_now

__all__ = [
    # Error codes
    "ErrorCode",
    # Base exception
    "DomainException",
    # Exception categories
    "AuthenticationError",
    "ConflictError",
    "EntityNotFoundError",
    "ForbiddenError",
    "RepositoryError",
    "ValidationError",
    # Utilities
    "ensure_tz_aware",
    "utc_now",
]
