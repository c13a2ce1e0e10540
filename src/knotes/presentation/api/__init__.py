"""FastAPI application for K-Notes."""

from knotes.presentation.api.app import create_app

__all__ = ["create_app"]
