"""SQLAlchemy implementation for knotes_identity persistence.

Provides:
- UserModel: SQLAlchemy model for users
- SessionModel: SQLAlchemy model for login sessions
- UserRepositorySQLAlchemy: Repository implementation for users
- SessionRepositorySQLAlchemy: Repository implementation for sessions
"""

from knotes_identity.infrastructure.persistence.sqlalchemy.models import (
    SessionModel,
    UserModel,
)
from knotes_identity.infrastructure.persistence.sqlalchemy.repositories import (
    SessionRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)

__all__ = [
    "SessionModel",
    "SessionRepositorySQLAlchemy",
    "UserModel",
    "UserRepositorySQLAlchemy",
]
