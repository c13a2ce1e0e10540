"""Public configuration router."""

from fastapi import APIRouter

from knotes.presentation.api.dependencies import SettingsDep
from knotes.presentation.api.schemas.config import ConfigResponse

router = APIRouter()


@router.get("", summary="Get client configuration")
async def get_config(settings: SettingsDep) -> ConfigResponse:
    """Settings a client needs before anyone has logged in."""
    return ConfigResponse(allow_registration=settings.allow_registration)
