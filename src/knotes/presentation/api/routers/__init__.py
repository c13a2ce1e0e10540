from knotes.presentation.api.routers.auth import router as auth_router
from knotes.presentation.api.routers.config import router as config_router

__all__ = [
    "auth_router",
    "config_router",
]
