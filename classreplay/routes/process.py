"""
Processing routes

Upload a recording with its markers. ``/api/process`` queues a background
task and answers at once; ``/api/process/sync`` runs a single marker and
answers with its result.

Security measures on uploads:
- Filename sanitization (path traversal prevention)
- Extension / content type check
- Streaming size limit
"""

import json
import math
import uuid
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, UploadFile

from ..config import ALLOWED_AUDIO_EXTENSIONS, ALLOWED_AUDIO_MIME_TYPES, DEFAULT_MARKER_SECONDS, MAX_UPLOAD_SIZE
from ..core import get_logger, sanitize_filename
from ..models import ProcessResponse
from ..services.infrastructure.orchestration import TaskRunner
from ..services.pipeline.markers import MarkerProcessor
from .dependencies import get_processor, get_task_runner, get_upload_dir

logger = get_logger(__name__, component="process_routes")

router = APIRouter(prefix="/api", tags=["process"])

UPLOAD_CHUNK_SIZE = 1024 * 1024


def parse_markers(raw: Optional[str]) -> List[float]:
    """
    Parse the ``markers`` form field.

    A missing or unparseable value falls back to the default marker; a single
    number is treated as a one-element list.
    """
    if not raw or not raw.strip():
        return [float(DEFAULT_MARKER_SECONDS)]
    try:
        value = json.loads(raw)
    except ValueError:
        logger.warning("Unparseable markers, using default", extra={"markers": raw[:100]})
        return [float(DEFAULT_MARKER_SECONDS)]

    values = value if isinstance(value, list) else [value]
    markers = []
    for item in values:
        if isinstance(item, bool) or not isinstance(item, (int, float)):
            raise HTTPException(status_code=400, detail=f"Invalid marker: {item!r}")
        if not math.isfinite(item):
            raise HTTPException(status_code=400, detail=f"Marker must be a finite number: {item}")
        if item < 0:
            raise HTTPException(status_code=400, detail=f"Marker must not be negative: {item}")
        markers.append(float(item))
    return markers


def _check_audio_type(filename: str, content_type: Optional[str]) -> str:
    """Return the extension to store the upload under (empty when only the content type matched)."""
    extension = Path(filename.replace("\\", "/")).suffix.lower()
    if extension in ALLOWED_AUDIO_EXTENSIONS:
        return extension
    if content_type in ALLOWED_AUDIO_MIME_TYPES:
        return ""
    raise HTTPException(status_code=400, detail="只支持音频文件（MP3, WAV, M4A）")


async def save_upload(audio: UploadFile, upload_dir: Path) -> Path:
    """Stream the upload to ``upload_dir`` under a generated name."""
    if not audio.filename:
        raise HTTPException(status_code=400, detail="请上传音频文件")
    # The client name is only logged; the type check alone decides acceptance.
    try:
        filename = sanitize_filename(audio.filename)
    except ValueError:
        filename = "<unnamed>"
    extension = _check_audio_type(audio.filename, audio.content_type)

    upload_dir.mkdir(parents=True, exist_ok=True)
    destination = upload_dir / f"audio-{uuid.uuid4().hex}{extension}"
    size = 0
    try:
        with open(destination, "wb") as f:
            while True:
                chunk = await audio.read(UPLOAD_CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > MAX_UPLOAD_SIZE:
                    logger.warning("File too large", extra={
                        "size": size,
                        "max_size": MAX_UPLOAD_SIZE,
                        "upload_name": filename,
                    })
                    raise HTTPException(
                        status_code=413,
                        detail=f"文件太大，最大支持 {MAX_UPLOAD_SIZE // (1024 * 1024)}MB",
                    )
                f.write(chunk)
    except BaseException:
        destination.unlink(missing_ok=True)
        raise

    logger.info("Audio uploaded", extra={"upload_name": filename, "size": size, "path": str(destination)})
    return destination


@router.post("/process", response_model=ProcessResponse)
async def process_audio(
    background_tasks: BackgroundTasks,
    audio: UploadFile = File(...),
    markers: Optional[str] = Form(None),
    runner: TaskRunner = Depends(get_task_runner),
    upload_dir: Path = Depends(get_upload_dir),
):
    """Queue a task processing every marker of the uploaded recording."""
    marker_times = parse_markers(markers)
    audio_path = await save_upload(audio, upload_dir)

    record = runner.create_task(audio_path, marker_times)
    background_tasks.add_task(runner.run, record.id)

    return ProcessResponse(
        task_id=record.id,
        status=record.status.value,
        message="任务已创建，正在处理中",
        markers=marker_times,
    )


@router.post("/process/sync")
async def process_audio_sync(
    audio: UploadFile = File(...),
    marker: float = Form(DEFAULT_MARKER_SECONDS),
    processor: MarkerProcessor = Depends(get_processor),
    upload_dir: Path = Depends(get_upload_dir),
):
    """Process one marker and wait for the result; meant for tests and short files."""
    if not math.isfinite(marker):
        raise HTTPException(status_code=400, detail=f"Marker must be a finite number: {marker}")
    if marker < 0:
        raise HTTPException(status_code=400, detail=f"Marker must not be negative: {marker}")
    audio_path = await save_upload(audio, upload_dir)
    try:
        result = await processor.process_marker(audio_path, marker)
    except Exception as e:
        logger.error("Synchronous processing failed", extra={"error": str(e)}, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        audio_path.unlink(missing_ok=True)
    return result.to_dict()
