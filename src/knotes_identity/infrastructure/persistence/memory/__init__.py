"""In-memory persistence adapters."""

from knotes_identity.infrastructure.persistence.memory.user_repository import (
    InMemoryUserRepository,
)

__all__ = ["InMemoryUserRepository"]
