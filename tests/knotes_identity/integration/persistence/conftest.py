"""Database fixtures for identity repository tests."""

from tests.shared.fixtures.database import (  # noqa: F401
    database_url,
    db_engine,
    db_session,
    postgres_container,
)
