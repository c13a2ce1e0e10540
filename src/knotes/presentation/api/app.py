"""Builds the K-Notes FastAPI application.

Versioned endpoints live under ``/api/v1``; ``/health`` and ``/`` stay
unversioned so probes do not move between releases.
"""

import logging
import sys
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from knotes.infrastructure.persistence.sqlalchemy import (
    create_database_engine,
    create_tables,
)
from knotes.presentation.api.exception_handlers import setup_exception_handlers
from knotes.presentation.api.routers import auth_router, config_router
from knotes.presentation.api.schemas.common import HealthResponse
from knotes_config.settings import Settings, get_settings
from knotes_identity import SessionService
from knotes_identity.infrastructure.persistence.sqlalchemy import (
    SessionRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)


_OWN_LOGGERS = ("knotes", "knotes_identity", "knotes_config")
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncpg", "httpx", "httpcore")


@lru_cache(maxsize=1)
def _configure_logging(log_level_str: str = "INFO") -> None:
    """Send log records to stdout, once per process and level.

    Our own packages log at ``log_level_str``; chatty libraries are held
    at WARNING regardless.
    """
    level = logging.getLevelName(log_level_str.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    for name in _OWN_LOGGERS:
        logging.getLogger(name).setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


logger = logging.getLogger(__name__)

# API version info
API_VERSION = "1.0.0"
API_V1_PREFIX = "/api/v1"

# OpenAPI tags metadata for documentation
OPENAPI_TAGS = [
    {
        "name": "Authentication",
        "description": """User registration, login and session management.

**Registration & Login:**
- Register new accounts with email/password
- Login to start a session (HttpOnly cookie)
- Logout ends the session server-side

**Security:**
- Passwords are hashed with bcrypt
- Only a keyed hash of the session token is stored
- Sessions die when the password changes
""",
    },
    {
        "name": "Config",
        "description": "Public client configuration.",
    },
    {
        "name": "Health",
        "description": "Service health monitoring endpoints.",
    },
    {
        "name": "Info",
        "description": "API information and discovery.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Owns the engine: it is created here, shared by every request through
    ``app.state.session_maker`` and disposed on shutdown.
    """
    settings: Settings = app.state.settings

    logger.info("Starting %s API v%s...", settings.app_name, API_VERSION)
    engine = create_database_engine(
        settings.database_url,
        max_connections=settings.database_max_connections,
        acquire_timeout=settings.database_acquire_timeout,
    )
    app.state.engine = engine
    app.state.session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    await _init_database_schema(engine)
    await _purge_expired_sessions(app.state.session_maker, settings)
    yield

    # Shutdown - dispose the shared engine and its connection pool
    logger.info("Shutting down %s API...", settings.app_name)
    await engine.dispose()
    logger.info("Database connections closed")


async def _init_database_schema(engine: AsyncEngine) -> None:
    """Initialize database schema (if not existent) and verify connectivity."""
    try:
        await create_tables(engine)
    except (ConnectionRefusedError, OSError):
        logger.critical("Could not connect to the database.")
        raise SystemExit(1) from None


async def _purge_expired_sessions(
    session_maker: async_sessionmaker[AsyncSession],
    settings: Settings,
) -> None:
    async with session_maker() as session:
        session_service = SessionService(
            session_repository=SessionRepositorySQLAlchemy(session),
            user_repository=UserRepositorySQLAlchemy(session),
            secret_key=settings.session_secret.get_secret_value(),
            expiry_days=settings.session_expiry_days,
        )
        await session_service.purge_expired()
        await session.commit()


def create_v1_router() -> APIRouter:
    """Create the v1 API router with all endpoints.

    Returns
    -------
    APIRouter with all v1 endpoints mounted.
    """
    v1_router = APIRouter()

    v1_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
    v1_router.include_router(config_router, prefix="/config", tags=["Config"])

    return v1_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings
        Optional settings override for testing.

    Returns
    -------
    Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    # Configure logging on first app creation (not on module import)
    _configure_logging(settings.log_level)

    app_name = settings.app_name

    app = FastAPI(
        title=f"{app_name} API",
        description="Account registration, login and session authentication.",
        version=API_VERSION,
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        openapi_url="/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )
    app.state.settings = settings

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register domain exception handlers for consistent error responses
    setup_exception_handlers(app)

    # Include versioned API router
    app.include_router(create_v1_router(), prefix=API_V1_PREFIX)

    # Health check endpoint (unversioned - always accessible)
    @app.get("/health", tags=["Health"])
    async def health_check(request: Request) -> HealthResponse:
        """Health check endpoint.

        Unversioned for load balancer/monitoring compatibility.
        """
        return HealthResponse(
            status="healthy",
            version=API_VERSION,
            database=request.app.state.settings.database_backend.value,
        )

    # Root endpoint with API info
    @app.get("/", tags=["Info"])
    async def root() -> dict:
        """API root endpoint with version information."""
        return {
            "name": f"{app_name} API",
            "version": API_VERSION,
            "docs": "/docs" if settings.api_debug else None,
            "api_base": API_V1_PREFIX,
            "endpoints": {
                "health": "/health",
                "auth": f"{API_V1_PREFIX}/auth",
                "config": f"{API_V1_PREFIX}/config",
            },
        }

    return app
