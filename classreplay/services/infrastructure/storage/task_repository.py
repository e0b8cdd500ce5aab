"""
Task repository - abstract data access for processing tasks.

The pipeline never touches task state directly: the task runner reads and
writes ``TaskRecord`` objects through a ``TaskRepository``. The in-memory
implementation is the default; anything offering get/set/delete can replace it.

Classes:
    TaskRecord: Data model for one upload and its markers
    TaskRepository: Abstract interface for task data access
    InMemoryTaskRepository: Process-local implementation
"""

import copy
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ....models.status import TaskStatus


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class TaskRecord:
    """
    State of one processing task.

    Attributes:
        id: Unique task identifier
        status: processing, completed or failed
        progress: Overall progress as an integer percentage (0-100)
        message: Human-readable status message
        markers: Marker times in seconds, in request order
        results: Per-marker result dicts indexed by marker position; None until
            the marker has reported anything
        error: Error message if the task failed before processing markers
        audio_file: Uploaded recording (removed once the task finishes)
    """
    id: str
    status: TaskStatus = TaskStatus.PROCESSING
    progress: int = 0
    message: str = ""
    markers: List[float] = field(default_factory=list)
    results: List[Optional[Dict[str, Any]]] = field(default_factory=list)
    error: Optional[str] = None
    audio_file: Optional[str] = None
    created_at: str = field(default_factory=_utcnow)
    completed_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_id": self.id,
            "status": self.status.value,
            "progress": self.progress,
            "message": self.message,
            "markers": list(self.markers),
            "results": copy.deepcopy(self.results),
            "error": self.error,
            "created_at": self.created_at,
            "completed_at": self.completed_at,
        }


class TaskRepository(ABC):
    """Abstract repository for task records."""

    @abstractmethod
    def get(self, task_id: str) -> Optional[TaskRecord]:
        """Return a copy of the record, or None if unknown."""

    @abstractmethod
    def set(self, record: TaskRecord) -> None:
        """Insert or replace a record."""

    @abstractmethod
    def delete(self, task_id: str) -> bool:
        """Remove a record; True if it existed."""

    @abstractmethod
    def list_all(self) -> List[TaskRecord]:
        """All records, newest first."""


class InMemoryTaskRepository(TaskRepository):
    """
    Dictionary-backed repository.

    Records are copied on the way in and out so callers never share mutable
    state with the store.
    """

    def __init__(self):
        self._records: Dict[str, TaskRecord] = {}
        self._lock = threading.RLock()

    def get(self, task_id: str) -> Optional[TaskRecord]:
        with self._lock:
            record = self._records.get(task_id)
            return copy.deepcopy(record) if record else None

    def set(self, record: TaskRecord) -> None:
        with self._lock:
            self._records[record.id] = copy.deepcopy(record)

    def delete(self, task_id: str) -> bool:
        with self._lock:
            return self._records.pop(task_id, None) is not None

    def list_all(self) -> List[TaskRecord]:
        with self._lock:
            records = [copy.deepcopy(record) for record in self._records.values()]
        return sorted(records, key=lambda record: record.created_at, reverse=True)


# Global instance
_repository: Optional[TaskRepository] = None


def get_task_repository() -> TaskRepository:
    """Get the global task repository instance."""
    global _repository
    if _repository is None:
        _repository = InMemoryTaskRepository()
    return _repository
