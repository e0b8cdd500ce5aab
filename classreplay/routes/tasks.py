"""
Task routes.

Routes read task state through the TaskRepository; they never touch the
processor.
"""

import shutil
from pathlib import Path
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..core import get_logger, secure_file_path, validate_identifier
from ..models import DeleteResponse, TaskResponse, TaskSummary
from ..services.infrastructure.storage import TaskRecord, TaskRepository
from .dependencies import get_output_dir, get_repository

logger = get_logger(__name__, component="task_routes")

router = APIRouter(prefix="/api", tags=["tasks"])


def _get_or_404(repository: TaskRepository, task_id: str) -> TaskRecord:
    record = repository.get(task_id)
    if record is None:
        raise HTTPException(status_code=404, detail="任务不存在")
    return record


def marker_output_ids(record: TaskRecord) -> List[str]:
    """Marker ids recorded in the task's (possibly partial) results."""
    ids = []
    for entry in record.results:
        marker_id = (entry or {}).get("marker_id")
        if isinstance(marker_id, str) and validate_identifier(marker_id):
            ids.append(marker_id)
    return ids


@router.get("/tasks", response_model=List[TaskSummary])
async def list_tasks(repository: TaskRepository = Depends(get_repository)):
    """All tasks, newest first."""
    return [
        TaskSummary(
            task_id=record.id,
            status=record.status.value,
            progress=record.progress,
            message=record.message,
            marker_count=len(record.markers),
            created_at=record.created_at,
            completed_at=record.completed_at,
        )
        for record in repository.list_all()
    ]


@router.get("/tasks/{task_id}", response_model=TaskResponse)
async def get_task(task_id: str, repository: TaskRepository = Depends(get_repository)):
    return TaskResponse(**_get_or_404(repository, task_id).to_dict())


@router.delete("/tasks/{task_id}", response_model=DeleteResponse)
async def delete_task(
    task_id: str,
    repository: TaskRepository = Depends(get_repository),
    output_dir: Path = Depends(get_output_dir),
):
    """Delete a task together with the artifact directories of its markers."""
    record = _get_or_404(repository, task_id)

    removed = 0
    for marker_id in marker_output_ids(record):
        marker_dir = secure_file_path(output_dir, marker_id)
        if marker_dir is not None and marker_dir.is_dir():
            shutil.rmtree(marker_dir, ignore_errors=True)
            removed += 1

    repository.delete(task_id)
    logger.info("Task deleted", extra={"task_id": task_id, "removed_outputs": removed})
    return DeleteResponse(status="deleted", task_id=task_id, removed_outputs=removed)
