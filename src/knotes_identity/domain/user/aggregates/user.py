"""User aggregate for identity concerns."""

from datetime import datetime
from typing import Union
from uuid import UUID, uuid4

from knotes.domain.shared.time import utc_now
from knotes_identity.domain.user.value_objects.email import Email

LOCAL_SUBJECT_PREFIX = "local|"


class User:
    """
    User aggregate root.

    A user is identified internally by ``id`` and externally by ``subject``,
    the principal asserted by whatever authenticated it (an identity
    provider, or a synthesized ``local|<uuid>`` for password accounts).
    """

    def __init__(
        self,
        subject: str,
        email: Union[str, Email],
        password_hash: str | None = None,
        id: UUID | None = None,
        created_at: datetime | None = None,
    ):
        self._id = id or uuid4()
        self._subject = subject
        self._email = email if isinstance(email, Email) else Email(email)
        self._password_hash = password_hash
        self._created_at = created_at or utc_now()

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def subject(self) -> str:
        return self._subject

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def email_obj(self) -> Email:
        return self._email

    @property
    def password_hash(self) -> str | None:
        return self._password_hash

    @property
    def has_password(self) -> bool:
        return self._password_hash is not None

    @property
    def is_local(self) -> bool:
        return self._subject.startswith(LOCAL_SUBJECT_PREFIX)

    @property
    def created_at(self) -> datetime:
        return self._created_at

    def link_subject(self, subject: str) -> bool:
        """Rebind this user to ``subject``.

        Returns True when the stored subject actually changed.
        """
        if subject == self._subject:
            return False
        self._subject = subject
        return True

    def set_password_hash(self, password_hash: str) -> None:
        self._password_hash = password_hash

    @classmethod
    def create(cls, subject: str, email: Union[str, Email]) -> "User":
        return cls(subject=subject, email=email)

    @classmethod
    def create_local(cls, email: Union[str, Email], password_hash: str) -> "User":
        return cls(
            subject=f"{LOCAL_SUBJECT_PREFIX}{uuid4()}",
            email=email,
            password_hash=password_hash,
        )

    @classmethod
    def reconstitute(
        cls,
        id: UUID,
        subject: str,
        email: Union[str, Email],
        password_hash: str | None,
        created_at: datetime,
    ) -> "User":
        return cls(
            id=id,
            subject=subject,
            email=email,
            password_hash=password_hash,
            created_at=created_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"User(id={self._id}, subject={self._subject}, "
            f"email={self._email.value})"
        )
