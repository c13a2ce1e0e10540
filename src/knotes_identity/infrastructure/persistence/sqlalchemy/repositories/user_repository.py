"""SQLAlchemy implementation of UserRepository."""

import logging
from typing import Optional, Union
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from knotes.domain.shared.exceptions import RepositoryError
from knotes.domain.shared.time import ensure_tz_aware
from knotes_identity.domain.user import (
    Email,
    User,
    UserAlreadyExistsError,
    UserRepository,
)
from knotes_identity.infrastructure.persistence.sqlalchemy.models import UserModel

logger = logging.getLogger(__name__)

# How each backend names the subject uniqueness rule in the first line of its
# error: PostgreSQL reports the index, SQLite the column.
_SUBJECT_CONFLICT_MARKERS = ('"ix_users_subject"', "users.subject")


def _is_subject_conflict(error: IntegrityError) -> bool:
    """Tell a subject clash from an email clash.

    Only the first line is inspected; PostgreSQL appends the offending
    value on a DETAIL line, and an email may contain any marker text.
    """
    headline = str(error.orig).split("\n", 1)[0]
    return any(marker in headline for marker in _SUBJECT_CONFLICT_MARKERS)


class UserRepositorySQLAlchemy(UserRepository):
    """SQLAlchemy implementation of the UserRepository interface.

    Works unchanged against SQLite and PostgreSQL. Driver errors are
    translated into domain exceptions before they leave this class.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        model = await self._find_one(select(UserModel).where(UserModel.id == user_id))
        return self._map_to_domain(model) if model else None

    async def find_by_subject(self, subject: str) -> Optional[User]:
        model = await self._find_one(
            select(UserModel).where(UserModel.subject == subject),
        )
        return self._map_to_domain(model) if model else None

    async def find_by_email(self, email: Union[str, Email]) -> Optional[User]:
        email_value = (
            email.value if isinstance(email, Email) else Email.normalize(email)
        )

        model = await self._find_one(
            select(UserModel).where(UserModel.email == email_value),
        )
        return self._map_to_domain(model) if model else None

    async def save(self, user: User) -> None:
        existing = await self._find_model_by_id(user.id)

        try:
            if existing:
                self._update_model(existing, user)
                logger.debug("Updated user: %s", user.id)
            else:
                self._session.add(self._map_to_model(user))
                logger.debug("Inserted user: %s", user.id)

            await self._session.flush()
        except IntegrityError as e:
            identifier = user.subject if _is_subject_conflict(e) else user.email
            raise UserAlreadyExistsError(identifier) from e
        except SQLAlchemyError as e:
            logger.exception("Failed to save user %s", user.id)
            raise RepositoryError(details={"operation": "save"}) from e

    async def delete(self, user_id: UUID) -> None:
        model = await self._find_model_by_id(user_id)
        if model is None:
            return

        try:
            await self._session.delete(model)
            await self._session.flush()
        except SQLAlchemyError as e:
            logger.exception("Failed to delete user %s", user_id)
            raise RepositoryError(details={"operation": "delete"}) from e
        logger.info("Deleted user: %s", user_id)

    async def _find_model_by_id(self, user_id: UUID) -> Optional[UserModel]:
        return await self._find_one(select(UserModel).where(UserModel.id == user_id))

    async def _find_one(self, stmt: Select) -> Optional[UserModel]:
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            logger.exception("User lookup failed")
            raise RepositoryError(details={"operation": "find"}) from e
        return result.scalar_one_or_none()

    def _map_to_domain(self, model: UserModel) -> User:
        return User.reconstitute(
            id=model.id,
            subject=model.subject,
            email=model.email,
            password_hash=model.password_hash,
            created_at=ensure_tz_aware(model.created_at),
        )

    def _map_to_model(self, user: User) -> UserModel:
        return UserModel(
            id=user.id,
            subject=user.subject,
            email=user.email,
            password_hash=user.password_hash,
            created_at=user.created_at,
        )

    def _update_model(self, model: UserModel, user: User) -> None:
        model.subject = user.subject
        model.email = user.email
        model.password_hash = user.password_hash
