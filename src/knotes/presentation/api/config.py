"""API configuration adapter.

Bridges the centralized knotes_config settings with the API layer. The
settings an application was created with travel on ``app.state`` so that
tests can build apps with their own configuration side by side.
"""

from fastapi import Request

from knotes_config.settings import Settings, get_settings


def get_api_settings(request: Request) -> Settings:
    """Get the settings the running application was created with.

    Falls back to the process-wide settings for apps that were assembled
    without ``create_app``.
    """
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        return get_settings()
    return settings
