"""SQLAlchemy wiring shared by all K-Notes persistence adapters."""

from knotes.infrastructure.persistence.sqlalchemy.base import Base
from knotes.infrastructure.persistence.sqlalchemy.database import (
    DatabaseBackend,
    create_database_engine,
    create_tables,
    drop_tables,
    redact_url,
)

__all__ = [
    "Base",
    "DatabaseBackend",
    "create_database_engine",
    "create_tables",
    "drop_tables",
    "redact_url",
]
