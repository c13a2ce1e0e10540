"""The session cookie, as issued by the auth routes and refreshed on use."""

from fastapi import Response

from knotes_config.settings import Settings

# Cookie carrying the raw session token
SESSION_COOKIE = "knotes_session"


def set_session_cookie(
    response: Response,
    token: str,
    max_age_seconds: int,
    settings: Settings,
) -> None:
    """Hand the raw session token to the browser.

    The cookie is always HttpOnly; Secure, SameSite and Domain come from
    the ``api_cookie_*`` settings. Re-sending it with a fresh ``max_age``
    keeps the browser's copy alive as long as the server-side session.
    """
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        secure=settings.api_cookie_secure,
        samesite=settings.api_cookie_samesite,
        max_age=max_age_seconds,
        path="/",
        domain=settings.api_cookie_domain,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    """Expire the session cookie on the client."""
    response.delete_cookie(
        key=SESSION_COOKIE,
        path="/",
        domain=settings.api_cookie_domain,
    )
