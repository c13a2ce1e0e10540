# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""SQLAlchemy models for identity management."""

from knotes_identity.infrastructure.persistence.sqlalchemy.models.session_model import (
    SessionModel,
)
from knotes_identity.infrastructure.persistence.sqlalchemy.models.user_model import (
    UserModel,
)

__all__ = [
    "SessionModel",
    "UserModel",
]
