"""
API schemas for processing and task endpoints
"""

from pydantic import BaseModel
from typing import Any, Dict, List, Optional


class ProcessResponse(BaseModel):
    """Returned as soon as a task has been queued"""
    task_id: str
    status: str
    message: str
    markers: List[float] = []


class TaskResponse(BaseModel):
    """Full task state, including per-marker results"""
    task_id: str
    status: str
    progress: int
    message: str
    markers: List[float] = []
    results: List[Optional[Dict[str, Any]]] = []
    error: Optional[str] = None
    created_at: str
    completed_at: Optional[str] = None


class TaskSummary(BaseModel):
    """Compact task listing entry"""
    task_id: str
    status: str
    progress: int
    message: str
    marker_count: int
    created_at: str
    completed_at: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    ffmpeg: bool
    timestamp: str


class ConfigStatusResponse(BaseModel):
    """Which external services have credentials configured"""
    llm: bool
    image: bool
    asr: bool
    tts: bool
    ffmpeg: bool


class DeleteResponse(BaseModel):
    status: str
    task_id: str
    removed_outputs: int = 0
