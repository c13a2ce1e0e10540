"""Application settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. KNOTES_ENV_FILE environment variable (path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from knotes.infrastructure.persistence.sqlalchemy.database import DatabaseBackend


def _find_project_root() -> Path:
    """Walk up from this file to the first directory that looks like the repo."""
    here = Path(__file__).resolve().parent
    markers = ("config", "pyproject.toml", ".git")
    return next(
        (d for d in (here, *here.parents) if any((d / m).exists() for m in markers)),
        Path.cwd(),
    )


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _env_file_candidates() -> list[Path]:
    candidates = []
    explicit = os.environ.get("KNOTES_ENV_FILE")
    if explicit:
        path = Path(explicit)
        candidates.append(path if path.is_absolute() else _find_project_root() / path)
    config_dir = get_config_dir()
    candidates += [config_dir / ".env.dev", config_dir / ".env"]
    return candidates


def _resolve_env_file_path() -> Path | None:
    """Return the first existing env file.

    ``KNOTES_ENV_FILE`` (absolute or relative to the project root) wins over
    ``config/.env.dev``, which wins over ``config/.env``.
    """
    return next((p for p in _env_file_candidates() if p.exists()), None)


class Settings(BaseSettings):
    """K-Notes configuration.

    Field names map to upper-case environment variables
    (``database_url`` -> ``DATABASE_URL``). Process environment beats the
    env file, which beats the defaults below.
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Required; keys the HMAC of stored session tokens
    session_secret: SecretStr

    # Application
    app_name: str = "K-Notes"

    # Database (DATABASE_ prefix)
    database_url: str = "sqlite+aiosqlite:///./data/knotes.db"
    database_max_connections: int = Field(default=5, ge=1)
    database_acquire_timeout: float = Field(default=30.0, gt=0)

    # API (API_ prefix)
    api_host: str = "127.0.0.1"
    api_port: int = 3000
    api_debug: bool = False
    api_cors_origins: str = ""  # Empty = no CORS allowed (secure default)
    api_cookie_secure: bool = True  # Secure cookies by default
    api_cookie_samesite: Literal["lax", "strict", "none"] = "lax"
    api_cookie_domain: str | None = None

    @field_validator("api_cors_origins", mode="before")
    @classmethod
    def _validate_cors_origins(cls, v: Any) -> str:
        """Accept a list as well as a comma-separated string."""
        if isinstance(v, list):
            return ",".join(v)
        return str(v) if v else ""

    @field_validator("database_url")
    @classmethod
    def _validate_database_url(cls, v: str) -> str:
        """Reject URLs for backends we cannot serve."""
        DatabaseBackend.from_url(v)
        return v

    # Sessions
    session_expiry_days: int = Field(default=7, ge=1)

    # Registration
    allow_registration: bool = True

    # Password hashing
    password_hash_rounds: int = Field(default=12, ge=4, le=31)

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    # Computed properties
    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [o.strip() for o in self.api_cors_origins.split(",") if o.strip()]

    @property
    def database_backend(self) -> DatabaseBackend:
        """Storage backend selected by ``database_url``."""
        return DatabaseBackend.from_url(self.database_url)


@lru_cache()
def get_settings() -> Settings:
    """Load settings once per process; see ``clear_settings_cache``."""
    return Settings()  # type: ignore[call-arg]


def clear_settings_cache() -> None:
    """Forget the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
