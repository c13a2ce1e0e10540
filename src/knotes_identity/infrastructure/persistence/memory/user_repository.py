"""In-memory implementation of UserRepository.

Used by tests and for running the resolver without a database. It honours
the same uniqueness rules as the SQL tables.
"""

import logging
from typing import Optional, Union
from uuid import UUID

from knotes_identity.domain.user import (
    Email,
    User,
    UserAlreadyExistsError,
    UserRepository,
)

logger = logging.getLogger(__name__)


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self.store: dict[UUID, User] = {}

    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        user = self.store.get(user_id)
        return self._copy(user) if user else None

    async def find_by_subject(self, subject: str) -> Optional[User]:
        for user in self.store.values():
            if user.subject == subject:
                return self._copy(user)
        return None

    async def find_by_email(self, email: Union[str, Email]) -> Optional[User]:
        email_value = (
            email.value if isinstance(email, Email) else Email.normalize(email)
        )
        for user in self.store.values():
            if user.email == email_value:
                return self._copy(user)
        return None

    async def save(self, user: User) -> None:
        for other in self.store.values():
            if other.id == user.id:
                continue
            if other.email == user.email:
                raise UserAlreadyExistsError(user.email)
            if other.subject == user.subject:
                raise UserAlreadyExistsError(user.subject)

        self.store[user.id] = self._copy(user)
        logger.debug("Stored user: %s", user.id)

    async def delete(self, user_id: UUID) -> None:
        self.store.pop(user_id, None)

    @staticmethod
    def _copy(user: User) -> User:
        # Callers must not mutate stored state without calling save()
        return User.reconstitute(
            id=user.id,
            subject=user.subject,
            email=user.email_obj,
            password_hash=user.password_hash,
            created_at=user.created_at,
        )
