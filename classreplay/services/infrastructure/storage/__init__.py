"""Storage layer - task state."""

from .task_repository import InMemoryTaskRepository, TaskRecord, TaskRepository, get_task_repository

__all__ = ["TaskRepository", "InMemoryTaskRepository", "TaskRecord", "get_task_repository"]
