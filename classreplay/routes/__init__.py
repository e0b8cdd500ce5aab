"""
Routes module - contains all API route handlers
"""

from .files import router as files_router
from .health import router as health_router
from .process import router as process_router
from .tasks import router as tasks_router

__all__ = [
    "files_router",
    "health_router",
    "process_router",
    "tasks_router",
]
