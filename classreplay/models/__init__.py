"""
Data models: pipeline records, progress events and API schemas
"""

from .events import (
    BatchCompleted,
    BatchEvent,
    MarkerEvent,
    MarkerUpdate,
    ProgressEvent,
)
from .pipeline import (
    AudioSegment,
    KnowledgeAnalysis,
    MarkerFailure,
    MarkerOutcome,
    MarkerResult,
    PPTScript,
    Slide,
    SlideArtifact,
    SlideView,
    SubtitleCue,
    VideoView,
)
from .status import MarkerStage, Subject, TaskStatus
from .tasks import (
    ConfigStatusResponse,
    DeleteResponse,
    HealthResponse,
    ProcessResponse,
    TaskResponse,
    TaskSummary,
)

__all__ = [
    "BatchCompleted",
    "BatchEvent",
    "MarkerEvent",
    "MarkerUpdate",
    "ProgressEvent",
    "AudioSegment",
    "KnowledgeAnalysis",
    "MarkerFailure",
    "MarkerOutcome",
    "MarkerResult",
    "PPTScript",
    "Slide",
    "SlideArtifact",
    "SlideView",
    "SubtitleCue",
    "VideoView",
    "MarkerStage",
    "Subject",
    "TaskStatus",
    "ConfigStatusResponse",
    "DeleteResponse",
    "HealthResponse",
    "ProcessResponse",
    "TaskResponse",
    "TaskSummary",
]
