"""FastAPI dependency injection for the K-Notes API.

Provides dependencies for:
- Database sessions
- Service instances
- Authentication (current user from the session cookie)
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Cookie, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from knotes.presentation.api.config import get_api_settings
from knotes.presentation.api.cookies import SESSION_COOKIE, set_session_cookie
from knotes_config.settings import Settings
from knotes_identity import (
    AuthenticationService,
    NotAuthenticatedError,
    PasswordHashingService,
    SessionService,
    User,
)
from knotes_identity.infrastructure.persistence.sqlalchemy import (
    SessionRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)

logger = logging.getLogger(__name__)

SettingsDep = Annotated[Settings, Depends(get_api_settings)]


# -----------------------------------------------------------------------------
# Database Session
# -----------------------------------------------------------------------------


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Creates an async session for the request from the session maker the
    application lifespan put on ``app.state``.

    Yields
    ------
    AsyncSession for database operations
    """
    async with request.app.state.session_maker() as session:
        yield session


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


# -----------------------------------------------------------------------------
# Identity Services
# -----------------------------------------------------------------------------


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    """Get password hashing service."""
    return PasswordHashingService(rounds=settings.password_hash_rounds)


def get_authentication_service(
    session: DBSession,
    password_service: Annotated[PasswordHashingService, Depends(get_password_service)],
) -> AuthenticationService:
    """Get authentication service with all dependencies."""
    return AuthenticationService(
        user_repository=UserRepositorySQLAlchemy(session),
        password_service=password_service,
    )


def get_session_service(session: DBSession, settings: SettingsDep) -> SessionService:
    """Get the login session service."""
    return SessionService(
        session_repository=SessionRepositorySQLAlchemy(session),
        user_repository=UserRepositorySQLAlchemy(session),
        secret_key=settings.session_secret.get_secret_value(),
        expiry_days=settings.session_expiry_days,
    )


# Type aliases for injected services
AuthService = Annotated[AuthenticationService, Depends(get_authentication_service)]
LoginSessions = Annotated[SessionService, Depends(get_session_service)]

# Raw session token from the cookie, if any
SessionToken = Annotated[str | None, Cookie(alias=SESSION_COOKIE)]


# -----------------------------------------------------------------------------
# Current User (Session Cookie Authentication)
# -----------------------------------------------------------------------------


async def get_current_user(
    response: Response,
    session: DBSession,
    session_service: LoginSessions,
    settings: SettingsDep,
    token: SessionToken = None,
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    Resolving a session slides its expiry forward, and discards it when it
    is expired or stale, so the change is committed here before returning.
    The cookie is re-issued with a fresh max-age to follow the new expiry.

    Returns
    -------
    The authenticated User

    Raises
    ------
    NotAuthenticatedError
        If the cookie is missing or does not name a live session
    """
    if not token:
        raise NotAuthenticatedError

    user = await session_service.resolve(token)
    await session.commit()

    if user is None:
        logger.debug("Rejected request with unknown or stale session")
        raise NotAuthenticatedError

    set_session_cookie(response, token, session_service.max_age_seconds, settings)
    return user


# Type alias for injected current user
CurrentUser = Annotated[User, Depends(get_current_user)]
