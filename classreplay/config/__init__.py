"""
Application configuration and settings
"""

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from .constants import (
    API_TITLE,
    API_DESCRIPTION,
    API_VERSION,
    CORS_ORIGINS,
    ALLOWED_AUDIO_MIME_TYPES,
    ALLOWED_AUDIO_EXTENSIONS,
    MAX_UPLOAD_SIZE,
    DEFAULT_MARKER_SECONDS,
    ARTIFACT_MEDIA_TYPES,
)
from .paths import APP_DIR, PROJECT_DIR, DATA_DIR, UPLOAD_DIR, OUTPUT_DIR, TEMP_DIR
from .pipeline import PipelineSettings
from .services import (
    AsrConfig,
    ChatApiConfig,
    ServiceConfig,
    TtsConfig,
    load_service_config,
)

__all__ = [
    "API_TITLE",
    "API_DESCRIPTION",
    "API_VERSION",
    "CORS_ORIGINS",
    "ALLOWED_AUDIO_MIME_TYPES",
    "ALLOWED_AUDIO_EXTENSIONS",
    "MAX_UPLOAD_SIZE",
    "DEFAULT_MARKER_SECONDS",
    "ARTIFACT_MEDIA_TYPES",
    "APP_DIR",
    "PROJECT_DIR",
    "DATA_DIR",
    "UPLOAD_DIR",
    "OUTPUT_DIR",
    "TEMP_DIR",
    "PipelineSettings",
    "AsrConfig",
    "ChatApiConfig",
    "ServiceConfig",
    "TtsConfig",
    "load_service_config",
]
