"""Identity resolution and account linking."""

import logging
from typing import Optional
from uuid import UUID

from knotes.domain.shared.exceptions import ValidationError
from knotes_identity.domain.user.aggregates.user import User
from knotes_identity.domain.user.exceptions import UserNotFoundError
from knotes_identity.domain.user.repositories.user_repository import UserRepository
from knotes_identity.domain.user.value_objects.email import Email

logger = logging.getLogger(__name__)


class UserService:
    """
    Maps authenticated identities onto canonical User aggregates.

    An identity claim is a ``(subject, email)`` pair produced after an
    identity provider (or the local password flow) has vouched for the
    caller. The service keeps one user per person across changes in login
    method by reconciling first on subject, then on email.
    """

    def __init__(self, user_repository: UserRepository):
        self._user_repo = user_repository

    async def resolve_or_create(self, subject: str, email: str) -> User:
        """
        Return the user for an identity claim, creating or linking as needed.

        Lookups run in order and the first match wins:

        1. Exact subject match: the returning identity, returned untouched.
        2. Email match: the account is relinked to ``subject`` if it was
           created under a different one. This trusts possession of the
           email address and nothing else.
        3. No match: a new password-less user is created.

        Parameters
        ----------
        subject
            Opaque principal identifier asserted by the authenticator
        email
            Unvalidated email address from the same claim

        Returns
        -------
        The canonical User for this identity

        Raises
        ------
        ValidationError
            If ``subject`` is blank, or a new user would be created from an
            invalid email. The store is not modified in either case.
        UserAlreadyExistsError
            If a concurrent caller created the same user first
        RepositoryError
            If the store fails
        """
        if not subject or not subject.strip():
            msg = "Subject cannot be empty"
            raise ValidationError(msg)

        user = await self._user_repo.find_by_subject(subject)
        if user is not None:
            logger.debug("Resolved user %s by subject", user.id)
            return user

        user = await self._user_repo.find_by_email(email)
        if user is not None:
            previous_subject = user.subject
            if user.link_subject(subject):
                await self._user_repo.save(user)
                logger.warning(
                    "Linked user %s to new subject %s (was %s) via email match",
                    user.id,
                    subject,
                    previous_subject,
                )
            return user

        email_obj = Email(email)
        user = User.create(subject, email_obj)
        await self._user_repo.save(user)

        logger.info("Created user %s for subject %s", user.id, subject)
        return user

    async def get_by_id(self, user_id: UUID) -> User:
        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self._user_repo.find_by_email(email)

    async def delete(self, user_id: UUID) -> None:
        user = await self.get_by_id(user_id)
        await self._user_repo.delete(user.id)
        logger.info("Deleted user %s", user.id)
