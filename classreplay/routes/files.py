"""
Artifact download routes

Serves the slide images, narration tracks, videos and subtitle files of a
marker. Paths are built from validated parts only.
"""

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from ..config import ARTIFACT_MEDIA_TYPES
from ..core import get_logger, secure_file_path, validate_identifier
from .dependencies import get_output_dir

logger = get_logger(__name__, component="file_routes")

router = APIRouter(prefix="/api", tags=["files"])


@router.get("/files/{marker_id}/{filename}")
async def get_file(marker_id: str, filename: str, output_dir: Path = Depends(get_output_dir)):
    if not validate_identifier(marker_id):
        raise HTTPException(status_code=400, detail="Invalid marker ID format")

    file_path = secure_file_path(output_dir, marker_id, filename)
    if file_path is None:
        raise HTTPException(status_code=400, detail="Invalid file path")
    if not file_path.is_file():
        raise HTTPException(status_code=404, detail="文件不存在")

    media_type = ARTIFACT_MEDIA_TYPES.get(file_path.suffix.lower(), "application/octet-stream")
    return FileResponse(file_path, media_type=media_type, filename=file_path.name)
