"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional, Union
from uuid import UUID

from knotes_identity.domain.user.aggregates.user import User
from knotes_identity.domain.user.value_objects.email import Email


class UserRepository(ABC):
    """Repository port for User aggregates.

    Implementations raise ``RepositoryError`` for storage failures and
    ``UserAlreadyExistsError`` when a uniqueness constraint on email or
    subject is violated. Nothing store-specific leaks past this interface.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        """Find a user by their internal ID."""

    @abstractmethod
    async def find_by_subject(self, subject: str) -> Optional[User]:
        """Find a user by the exact subject they authenticate as."""

    @abstractmethod
    async def find_by_email(self, email: Union[str, Email]) -> Optional[User]:
        """Find a user by their (normalized) email address."""

    @abstractmethod
    async def save(self, user: User) -> None:
        """Insert or update a user, keyed by ID."""

    @abstractmethod
    async def delete(self, user_id: UUID) -> None:
        """Delete a user by ID. Deleting an unknown ID is a no-op."""
