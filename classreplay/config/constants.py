"""
Constants configuration

API settings, CORS configuration and upload limits.
"""

import os

# API settings
API_TITLE = "ClassReplay API"
API_DESCRIPTION = "Turn classroom recordings into narrated slide-deck videos, one per marked moment"
API_VERSION = "1.0.0"

# CORS origins
CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
]

# File upload settings
ALLOWED_AUDIO_MIME_TYPES = [
    "audio/mpeg",
    "audio/mp3",
    "audio/wav",
    "audio/x-wav",
    "audio/wave",
    "audio/mp4",
    "audio/x-m4a",
    "audio/m4a",
]

ALLOWED_AUDIO_EXTENSIONS = [".mp3", ".wav", ".m4a"]

MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", str(500 * 1024 * 1024)))

# Marker used when the client sends none (seconds into the recording)
DEFAULT_MARKER_SECONDS = 300

# MIME types for served artifacts
ARTIFACT_MEDIA_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".mp3": "audio/mpeg",
    ".mp4": "video/mp4",
    ".srt": "application/x-subrip",
    ".ass": "text/x-ssa",
}

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
]
