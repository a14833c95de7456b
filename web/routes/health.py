"""
Health check endpoint

GET /health - service status
"""

from fastapi import APIRouter, Depends

from core.config.loader import Settings
from core.constants import Defaults
from web.dependencies import get_app_settings
from web.models.responses import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Service status

    Returns:
        HealthResponse: status, mode and version
    """
    return HealthResponse(
        status="ok",
        mode=settings.mode.value,
        version=Defaults.APP_VERSION,
    )
