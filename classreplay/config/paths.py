"""
Paths configuration

Centralized directory paths for the application. ``CLASSREPLAY_DATA_DIR``
moves all runtime data (uploads, outputs, scratch space) elsewhere.
"""

import os
from pathlib import Path

APP_DIR = Path(__file__).parent.parent
PROJECT_DIR = APP_DIR.parent
DATA_DIR = Path(os.getenv("CLASSREPLAY_DATA_DIR", str(PROJECT_DIR / "data")))
UPLOAD_DIR = DATA_DIR / "uploads"
OUTPUT_DIR = DATA_DIR / "output"
TEMP_DIR = DATA_DIR / "temp"

# Ensure directories exist
UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
TEMP_DIR.mkdir(parents=True, exist_ok=True)

__all__ = ["APP_DIR", "PROJECT_DIR", "DATA_DIR", "UPLOAD_DIR", "OUTPUT_DIR", "TEMP_DIR"]
