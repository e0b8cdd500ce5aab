"""
Task runner - executes a marker batch for one upload and records its state.

The runner is the only writer of a task's record. Progress and per-marker
updates from the processor are folded into the record as they arrive; the
final outcomes replace the partial per-marker entries when the batch ends.
"""

import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ....core import LogTimer, TaskSetupError, get_logger, set_task_id
from ....models import MarkerUpdate, ProgressEvent, TaskStatus
from ....models.events import MARKER_STARTED
from ..storage import TaskRecord, TaskRepository
from ...pipeline.markers import MarkerProcessor

logger = get_logger(__name__, component="task_runner")


def merge_marker_update(entry: Optional[Dict[str, Any]], update: MarkerUpdate) -> Dict[str, Any]:
    """Fold a marker update into the marker's partial result entry."""
    merged = dict(entry or {})
    merged.update(update.data)
    merged["stage"] = update.stage
    merged["status"] = update.status
    if update.stage == MARKER_STARTED:
        merged["started"] = True
    return merged


class TaskRunner:
    def __init__(self, repository: TaskRepository, processor: MarkerProcessor):
        self.repository = repository
        self.processor = processor

    def create_task(self, audio_path: Path, markers: Sequence[float], task_id: Optional[str] = None) -> TaskRecord:
        record = TaskRecord(
            id=task_id or uuid.uuid4().hex,
            message="准备处理...",
            markers=list(markers),
            results=[None] * len(markers),
            audio_file=str(audio_path),
        )
        self.repository.set(record)
        logger.info("Task created", extra={"task_id": record.id, "markers": record.markers})
        return record

    def _update(self, task_id: str, **changes: Any) -> None:
        record = self.repository.get(task_id)
        if record is None:
            return
        for name, value in changes.items():
            setattr(record, name, value)
        self.repository.set(record)

    def _on_progress(self, task_id: str, event: ProgressEvent) -> None:
        self._update(task_id, progress=event.percent, message=event.message)

    def _on_marker_update(self, task_id: str, index: int, update: MarkerUpdate) -> None:
        record = self.repository.get(task_id)
        if record is None:
            return
        if index >= len(record.results):
            record.results.extend([None] * (index + 1 - len(record.results)))
        record.results[index] = merge_marker_update(record.results[index], update)
        self.repository.set(record)

    async def run(self, task_id: str) -> Optional[TaskRecord]:
        """
        Process every marker of the task.

        The uploaded recording is deleted afterwards, whatever the outcome.
        """
        record = self.repository.get(task_id)
        if record is None:
            logger.warning("Task not found", extra={"task_id": task_id})
            return None
        if record.status.is_terminal():
            logger.warning("Task already finished", extra={"task_id": task_id, "status": record.status.value})
            return record

        set_task_id(task_id)
        audio_path = Path(record.audio_file) if record.audio_file else None
        try:
            if audio_path is None or not audio_path.is_file():
                raise TaskSetupError(f"Audio file not found: {record.audio_file}")

            with LogTimer(logger, f"marker batch of {len(record.markers)}"):
                results = await self.processor.process_all_markers(
                    audio_path,
                    record.markers,
                    on_progress=lambda event: self._on_progress(task_id, event),
                    on_marker_update=lambda index, update: self._on_marker_update(task_id, index, update),
                )
            final_results: List[Optional[Dict[str, Any]]] = [outcome.to_dict() for outcome in results]
            self._update(
                task_id,
                status=TaskStatus.COMPLETED,
                progress=100,
                message="处理完成",
                results=final_results,
                completed_at=datetime.now(timezone.utc).isoformat(),
            )
            logger.info("Task completed", extra={
                "task_id": task_id,
                "succeeded": sum(1 for result in results if result.success),
                "failed": sum(1 for result in results if not result.success),
            })
        except Exception as e:
            logger.error("Task failed", extra={"task_id": task_id, "error": str(e)}, exc_info=True)
            self._update(
                task_id,
                status=TaskStatus.FAILED,
                error=str(e),
                message="处理失败",
                completed_at=datetime.now(timezone.utc).isoformat(),
            )
        finally:
            if audio_path is not None:
                try:
                    audio_path.unlink(missing_ok=True)
                except OSError as e:
                    logger.warning("Could not remove uploaded audio", extra={"path": str(audio_path), "error": str(e)})
            set_task_id(None)

        return self.repository.get(task_id)
