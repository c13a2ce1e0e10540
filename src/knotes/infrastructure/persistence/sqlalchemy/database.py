"""Storage backend selection and engine construction.

The backend is chosen at runtime from the database URL. SQLite and
PostgreSQL share the same models and repositories; only the engine
options differ.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from knotes.infrastructure.persistence.sqlalchemy.base import Base

logger = logging.getLogger(__name__)

SQLITE_BUSY_TIMEOUT_MS = 30_000


class DatabaseBackend(str, Enum):
    """Supported storage backends."""

    SQLITE = "sqlite"
    POSTGRES = "postgresql"

    @classmethod
    def from_url(cls, database_url: str) -> "DatabaseBackend":
        """Determine the backend from a SQLAlchemy URL.

        Raises
        ------
        ValueError
            If the URL is malformed or names an unsupported dialect
        """
        try:
            url = make_url(database_url)
        except ArgumentError as e:
            msg = f"Invalid database URL: {database_url!r}"
            raise ValueError(msg) from e

        dialect = url.drivername.split("+", 1)[0]
        try:
            return cls(dialect)
        except ValueError:
            msg = f"Unsupported database backend: {dialect!r}"
            raise ValueError(msg) from None


def redact_url(database_url: str) -> str:
    """Render a database URL with its password masked, for logging."""
    return make_url(database_url).render_as_string(hide_password=True)


def _is_sqlite_memory(database: str | None) -> bool:
    return not database or database == ":memory:" or "mode=memory" in database


def _prepare_sqlite_path(database: str | None) -> None:
    if _is_sqlite_memory(database):
        return
    Path(database).parent.mkdir(parents=True, exist_ok=True)  # type: ignore[arg-type]


def _install_sqlite_pragmas(engine: AsyncEngine, in_memory: bool) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection: Any, _connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        if not in_memory:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS}")
        cursor.close()


def create_database_engine(
    database_url: str,
    max_connections: int = 5,
    acquire_timeout: float = 30.0,
    echo: bool = False,
) -> AsyncEngine:
    """
    Create the async engine for the configured backend.

    Parameters
    ----------
    database_url
        SQLAlchemy URL, e.g. ``sqlite+aiosqlite:///./data/knotes.db`` or
        ``postgresql+asyncpg://user:pw@host/db``
    max_connections
        Pool size (PostgreSQL only; SQLite uses SQLAlchemy's defaults)
    acquire_timeout
        Seconds to wait for a pooled connection
    echo
        Log emitted SQL

    Returns
    -------
    AsyncEngine instance
    """
    backend = DatabaseBackend.from_url(database_url)

    if backend is DatabaseBackend.SQLITE:
        database = make_url(database_url).database
        _prepare_sqlite_path(database)
        engine = create_async_engine(database_url, echo=echo)
        _install_sqlite_pragmas(engine, in_memory=_is_sqlite_memory(database))
    else:
        engine = create_async_engine(
            database_url,
            echo=echo,
            pool_size=max_connections,
            max_overflow=0,
            pool_timeout=acquire_timeout,
            pool_pre_ping=True,
        )

    logger.info(
        "Using %s backend at %s",
        backend.value,
        redact_url(database_url),
    )
    return engine


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all database tables (idempotent).

    Uses SQLAlchemy's create_all() which only creates missing tables.
    Existing tables and their data are never modified or deleted.
    """
    # Import models to register with Base.metadata
    import knotes_identity.infrastructure.persistence.sqlalchemy.models  # noqa: F401, PLC0415, E501

    logger.info("Ensuring all database tables exist...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema is up to date (missing tables created if needed)")


async def drop_tables(engine: AsyncEngine) -> None:
    """
    Drop all database tables (USE WITH CAUTION!).

    This is primarily for testing and development reset scenarios.
    """
    import knotes_identity.infrastructure.persistence.sqlalchemy.models  # noqa: F401, PLC0415, E501

    logger.warning("Dropping all database tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Database tables dropped successfully")
