"""
Shared route dependencies

Routes get the repository, processor and directories through FastAPI
dependencies so tests can swap them with ``app.dependency_overrides``.
"""

from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from ..config import OUTPUT_DIR, UPLOAD_DIR
from ..services.infrastructure.orchestration import TaskRunner
from ..services.infrastructure.storage import TaskRepository, get_task_repository
from ..services.pipeline.markers import MarkerProcessor, create_marker_processor
from ..services.pipeline.media import MediaToolkit


def get_repository() -> TaskRepository:
    return get_task_repository()


@lru_cache(maxsize=1)
def _default_processor() -> MarkerProcessor:
    return create_marker_processor()


def get_processor() -> MarkerProcessor:
    return _default_processor()


def get_task_runner(
    repository: TaskRepository = Depends(get_repository),
    processor: MarkerProcessor = Depends(get_processor),
) -> TaskRunner:
    return TaskRunner(repository, processor)


def get_media_toolkit() -> MediaToolkit:
    return MediaToolkit()


def get_upload_dir() -> Path:
    return UPLOAD_DIR


def get_output_dir() -> Path:
    return OUTPUT_DIR
