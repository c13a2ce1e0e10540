"""SQLAlchemy model for the User aggregate."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from knotes.domain.shared.time import utc_now
from knotes.infrastructure.persistence.sqlalchemy.base import Base


class UserModel(Base):
    """SQLAlchemy model for persisting User aggregates.

    Both ``subject`` and ``email`` are unique so that concurrent resolvers
    cannot create two users for the same person.
    """

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    subject: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    password_hash: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, subject={self.subject}, email={self.email})>"
