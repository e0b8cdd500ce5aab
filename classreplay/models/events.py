"""
Progress and stage events emitted by the marker pipeline.

Callers either pass callbacks (``on_progress``, ``on_update``) or consume the
same events from ``MarkerProcessor.stream_all_markers``.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from .pipeline import MarkerOutcome
from .status import MarkerStage


@dataclass(frozen=True)
class ProgressEvent:
    percent: int
    message: str
    stage: Optional[MarkerStage] = None


@dataclass(frozen=True)
class MarkerUpdate:
    """
    A stage transition of one marker.

    ``stage`` is a ``MarkerStage`` value, or one of ``started`` / ``completed`` /
    ``failed`` for the batch-level lifecycle of a marker.
    """
    stage: str
    status: str
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MarkerEvent:
    index: int
    update: MarkerUpdate


@dataclass(frozen=True)
class BatchCompleted:
    results: List[MarkerOutcome]


BatchEvent = Union[ProgressEvent, MarkerEvent, BatchCompleted]

ProgressCallback = Callable[[ProgressEvent], None]
UpdateCallback = Callable[[MarkerUpdate], None]
MarkerUpdateCallback = Callable[[int, MarkerUpdate], None]

# Batch-level lifecycle stages
MARKER_STARTED = "started"
MARKER_COMPLETED = "completed"
MARKER_FAILED = "failed"


__all__ = [
    "ProgressEvent",
    "MarkerUpdate",
    "MarkerEvent",
    "BatchCompleted",
    "BatchEvent",
    "ProgressCallback",
    "UpdateCallback",
    "MarkerUpdateCallback",
    "MARKER_STARTED",
    "MARKER_COMPLETED",
    "MARKER_FAILED",
]
