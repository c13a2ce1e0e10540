"""K-Notes CLI application using Typer.

This module provides command-line utilities for the K-Notes backend:
running the API server, preparing the database, inspecting and resolving
users, and generating deployment secrets.
"""

import asyncio
import secrets
from collections.abc import Awaitable, Callable
from typing import NoReturn, TypeVar
from uuid import UUID

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from knotes.domain.shared.exceptions import DomainException
from knotes.infrastructure.persistence.sqlalchemy import (
    create_database_engine,
    create_tables,
    redact_url,
)
from knotes_config.settings import Settings, get_settings
from knotes_identity import User, UserService
from knotes_identity.infrastructure.persistence.sqlalchemy import (
    UserRepositorySQLAlchemy,
)

T = TypeVar("T")

app = typer.Typer(
    name="knotes",
    help="K-Notes - backend CLI",
    no_args_is_help=True,
)
console = Console()


db_app = typer.Typer(
    name="db",
    help="Database utilities",
    no_args_is_help=True,
)
app.add_typer(db_app)

users_app = typer.Typer(
    name="users",
    help="User inspection and identity resolution",
    no_args_is_help=True,
)
app.add_typer(users_app)

secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run_with_session(
    settings: Settings,
    work: Callable[[AsyncSession], Awaitable[T]],
) -> T:
    """Run ``work`` in a committed transaction against a fresh engine."""

    async def _main() -> T:
        engine = create_database_engine(
            settings.database_url,
            max_connections=settings.database_max_connections,
            acquire_timeout=settings.database_acquire_timeout,
        )
        try:
            await create_tables(engine)
            session_maker = async_sessionmaker(engine, expire_on_commit=False)
            async with session_maker() as session:
                try:
                    result = await work(session)
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise
                return result
        finally:
            await engine.dispose()

    return asyncio.run(_main())


def _print_user(user: User) -> None:
    table = Table(show_header=False, box=None)
    table.add_column(style="cyan")
    table.add_column()
    table.add_row("id", str(user.id))
    table.add_row("subject", user.subject)
    table.add_row("email", user.email)
    table.add_row("password", "set" if user.has_password else "none")
    table.add_row("created", user.created_at.isoformat())
    console.print(table)


def _fail(exc: DomainException) -> NoReturn:
    console.print(f"[red]{exc.message}[/red] [dim]({exc.code.value})[/dim]")
    raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, help="Bind address (default: API_HOST)"),
    port: int | None = typer.Option(None, help="Port (default: API_PORT)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn  # noqa: PLC0415

    settings = get_settings()
    uvicorn.run(
        "knotes.presentation.api.app:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_config=None,
    )


@db_app.command("init")
def db_init() -> None:
    """Create missing database tables (idempotent)."""
    settings = get_settings()

    async def _main() -> None:
        engine = create_database_engine(settings.database_url)
        try:
            await create_tables(engine)
        finally:
            await engine.dispose()

    asyncio.run(_main())
    console.print(
        f"[green]Database ready[/green] "
        f"({settings.database_backend.value}: {redact_url(settings.database_url)})"
    )


@users_app.command("resolve")
def users_resolve(
    subject: str = typer.Argument(..., help="Subject asserted by the authenticator"),
    email: str = typer.Argument(..., help="Email address from the same claim"),
) -> None:
    """Resolve an identity claim to a user, linking or creating as needed."""

    async def _work(session: AsyncSession) -> User:
        return await UserService(UserRepositorySQLAlchemy(session)).resolve_or_create(
            subject,
            email,
        )

    try:
        user = _run_with_session(get_settings(), _work)
    except DomainException as e:
        _fail(e)
    _print_user(user)


@users_app.command("show")
def users_show(
    user_id: UUID = typer.Argument(..., help="User ID"),
) -> None:
    """Show a user by ID."""

    async def _work(session: AsyncSession) -> User:
        return await UserService(UserRepositorySQLAlchemy(session)).get_by_id(user_id)

    try:
        user = _run_with_session(get_settings(), _work)
    except DomainException as e:
        _fail(e)
    _print_user(user)


@users_app.command("delete")
def users_delete(
    user_id: UUID = typer.Argument(..., help="User ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a user by ID."""
    if not yes:
        typer.confirm(f"Delete user {user_id}?", abort=True)

    async def _work(session: AsyncSession) -> None:
        await UserService(UserRepositorySQLAlchemy(session)).delete(user_id)

    try:
        _run_with_session(get_settings(), _work)
    except DomainException as e:
        _fail(e)
    console.print(f"[green]Deleted user {user_id}[/green]")


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate secure secrets for K-Notes configuration.

    Generates the required secret:
    - SESSION_SECRET: Key for hashing session tokens

    Copy the output to your .env file.
    """
    console.print("\n[bold green]K-Notes Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print(
        "\nGenerated secrets for your [bold].env[/bold] configuration file:\n"
    )

    session_secret = secrets.token_urlsafe(64)
    console.print(f"[cyan]SESSION_SECRET[/cyan]={session_secret}")

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]Keep this secret secure and never commit it "
        "to version control![/yellow]"
    )
    console.print(
        "[dim]Copy the above value to your config/.env (Docker) or "
        "config/.env.dev (local) file.[/dim]\n"
    )


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
