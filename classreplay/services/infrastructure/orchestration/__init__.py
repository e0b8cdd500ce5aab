"""Task orchestration - runs marker batches and tracks their state."""

from .task_runner import TaskRunner, merge_marker_update

__all__ = ["TaskRunner", "merge_marker_update"]
