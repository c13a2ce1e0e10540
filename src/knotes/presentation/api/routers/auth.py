"""Authentication router for registration, login, logout and session lookup."""

import logging

from fastapi import APIRouter, Response, status

from knotes.domain.shared.exceptions import DomainException
from knotes.presentation.api.cookies import clear_session_cookie, set_session_cookie
from knotes.presentation.api.dependencies import (
    AuthService,
    CurrentUser,
    DBSession,
    LoginSessions,
    SessionToken,
    SettingsDep,
)
from knotes.presentation.api.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from knotes.presentation.api.schemas.common import ErrorResponse
from knotes_identity import RegistrationDisabledError, User

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        created_at=user.created_at,
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={
        201: {"description": "User registered successfully"},
        400: {"model": ErrorResponse, "description": "Invalid email or weak password"},
        403: {"model": ErrorResponse, "description": "Registration disabled"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
async def register(
    request: RegisterRequest,
    response: Response,
    auth_service: AuthService,
    session_service: LoginSessions,
    session: DBSession,
    settings: SettingsDep,
) -> UserResponse:
    """
    Register a local account and log it in.

    The new session is returned as an HttpOnly cookie.
    """
    if not settings.allow_registration:
        raise RegistrationDisabledError

    try:
        user = await auth_service.register(
            email=request.email,
            password=request.password,
        )
        token = await session_service.start(user)
        await session.commit()
    except DomainException:
        await session.rollback()
        raise

    set_session_cookie(response, token, session_service.max_age_seconds, settings)
    return _to_response(user)


@router.post(
    "/login",
    summary="Authenticate user",
    responses={
        200: {"description": "Login successful"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(
    request: LoginRequest,
    response: Response,
    auth_service: AuthService,
    session_service: LoginSessions,
    session: DBSession,
    settings: SettingsDep,
) -> UserResponse:
    """
    Authenticate with email and password.

    Every failure cause yields the same 401 INVALID_CREDENTIALS.
    """
    try:
        user = await auth_service.authenticate(
            email=request.email,
            password=request.password,
        )
        token = await session_service.start(user)
        await session.commit()
    except DomainException:
        await session.rollback()
        raise

    set_session_cookie(response, token, session_service.max_age_seconds, settings)
    return _to_response(user)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout user",
    responses={
        204: {"description": "Logged out successfully"},
    },
)
async def logout(
    response: Response,
    session_service: LoginSessions,
    session: DBSession,
    settings: SettingsDep,
    token: SessionToken = None,
) -> None:
    """End the current session, if any, and clear the cookie."""
    if token:
        await session_service.end(token)
        await session.commit()
    clear_session_cookie(response, settings)


@router.api_route(
    "/me",
    methods=["GET", "POST"],
    summary="Get current user",
    responses={
        200: {"description": "Current user data"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_me(user: CurrentUser) -> UserResponse:
    """Get the user owning the session cookie."""
    return _to_response(user)
