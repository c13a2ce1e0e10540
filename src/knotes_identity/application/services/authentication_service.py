"""Authentication service for local registration and password login."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from knotes.domain.shared.exceptions import ValidationError
from knotes_identity.domain.user import (
    Email,
    Password,
    User,
    UserAlreadyExistsError,
)
from knotes_identity.exceptions import InvalidCredentialsError

if TYPE_CHECKING:
    from knotes_identity.domain.user import UserRepository
    from knotes_identity.services import PasswordHashingService

logger = logging.getLogger(__name__)


class AuthenticationService:
    """
    Application service for password-based accounts.

    Orchestrates password hashing with the User domain to provide:
    - Local user registration
    - The password authentication check

    Session handling is left to SessionService; this service only answers
    "who is this".
    """

    def __init__(
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
    ):
        self._user_repo = user_repository
        self._password_service = password_service

    async def register(self, email: str, password: str) -> User:
        email_obj = Email(email)
        password_obj = Password(password)

        existing_user = await self._user_repo.find_by_email(email_obj)
        if existing_user is not None:
            raise UserAlreadyExistsError(email_obj.value)

        password_hash = self._password_service.hash(password_obj)
        user = User.create_local(email_obj, password_hash)
        await self._user_repo.save(user)

        logger.info("User registered: %s", user.id)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        try:
            email_obj = Email(email)
        except ValidationError as e:
            raise InvalidCredentialsError from e

        user = await self._user_repo.find_by_email(email_obj)
        if user is None or user.password_hash is None:
            self._password_service.verify_decoy(password)
            raise InvalidCredentialsError

        if not self._password_service.verify(password, user.password_hash):
            raise InvalidCredentialsError

        if self._password_service.needs_rehash(user.password_hash):
            await self._rehash(user, password)

        logger.info("User authenticated: %s", user.id)
        return user

    async def _rehash(self, user: User, password: str) -> None:
        try:
            password_obj = Password(password)
        except ValidationError:
            # Predates the current length rules; keep the old hash
            return
        user.set_password_hash(self._password_service.hash(password_obj))
        await self._user_repo.save(user)
        logger.debug("Rehashed password for user: %s", user.id)
