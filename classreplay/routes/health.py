"""
Health and configuration status routes
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ..config import load_service_config
from ..models import ConfigStatusResponse, HealthResponse
from ..services.pipeline.media import MediaToolkit
from .dependencies import get_media_toolkit

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(media: MediaToolkit = Depends(get_media_toolkit)):
    return HealthResponse(
        status="ok",
        ffmpeg=media.is_available(),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/config/status", response_model=ConfigStatusResponse)
async def config_status(media: MediaToolkit = Depends(get_media_toolkit)):
    """Which external services have credentials; no secrets are returned."""
    config = load_service_config()
    return ConfigStatusResponse(
        llm=config.chat.is_configured,
        image=config.chat.is_configured,
        asr=config.asr.is_configured,
        tts=config.tts.is_configured,
        ffmpeg=media.is_available(),
    )
