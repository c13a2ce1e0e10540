"""SQLAlchemy implementation of SessionRepository."""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.expression import Executable

from knotes.domain.shared.exceptions import RepositoryError
from knotes.domain.shared.time import ensure_tz_aware, utc_now
from knotes_identity.infrastructure.persistence.sqlalchemy.models import (
    SessionModel,
)
from knotes_identity.repositories import SessionData, SessionRepository

logger = logging.getLogger(__name__)


class SessionRepositorySQLAlchemy(SessionRepository):
    """Sessions table adapter; driver errors leave as ``RepositoryError``."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(
        self,
        user_id: UUID,
        token_hash: str,
        auth_hash: str,
        expires_at: datetime,
    ) -> SessionData:
        model = SessionModel(
            id=uuid4(),
            user_id=user_id,
            token_hash=token_hash,
            auth_hash=auth_hash,
            expires_at=expires_at,
            created_at=utc_now(),
        )
        try:
            self._session.add(model)
            await self._session.flush()
        except SQLAlchemyError as e:
            logger.exception("Failed to create session for user %s", user_id)
            raise RepositoryError(details={"operation": "create_session"}) from e
        return self._to_data(model)

    async def find_by_token_hash(self, token_hash: str) -> SessionData | None:
        result = await self._execute(
            select(SessionModel).where(SessionModel.token_hash == token_hash),
            "find_session",
        )
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_data(model)

    async def touch(self, session_id: UUID, expires_at: datetime) -> None:
        await self._execute(
            update(SessionModel)
            .where(SessionModel.id == session_id)
            .values(expires_at=expires_at),
            "touch_session",
        )

    async def delete(self, session_id: UUID) -> None:
        await self._execute(
            delete(SessionModel).where(SessionModel.id == session_id),
            "delete_session",
        )

    async def delete_all_for_user(self, user_id: UUID) -> int:
        result = await self._execute(
            delete(SessionModel).where(SessionModel.user_id == user_id),
            "delete_user_sessions",
        )
        return result.rowcount  # type: ignore

    async def cleanup_expired(self) -> int:
        result = await self._execute(
            delete(SessionModel).where(SessionModel.expires_at <= utc_now()),
            "cleanup_sessions",
        )
        return result.rowcount  # type: ignore

    async def _execute(self, stmt: Executable, operation: str) -> Any:
        try:
            result = await self._session.execute(stmt)
            await self._session.flush()
        except SQLAlchemyError as e:
            logger.exception("Session store operation failed: %s", operation)
            raise RepositoryError(details={"operation": operation}) from e
        return result

    @staticmethod
    def _to_data(model: SessionModel) -> SessionData:
        return SessionData(
            id=model.id,
            user_id=model.user_id,
            token_hash=model.token_hash,
            auth_hash=model.auth_hash,
            expires_at=ensure_tz_aware(model.expires_at),
            created_at=ensure_tz_aware(model.created_at),
        )
