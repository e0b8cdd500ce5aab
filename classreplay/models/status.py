"""
Status enumerations for tasks and marker pipeline stages.
"""

from enum import Enum
from typing import Optional


class TaskStatus(str, Enum):
    """Lifecycle of a processing task (one upload, N markers)."""

    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)


class MarkerStage(str, Enum):
    """Stages a single marker moves through, in order."""

    PENDING = "pending"
    EXTRACTING = "extracting"
    TRANSCRIBING = "transcribing"
    ANALYZING = "analyzing"
    SCRIPTING = "scripting"
    SYNTHESIZING_SLIDES = "synthesizing_slides"
    ASSEMBLING_VIDEO = "assembling_video"
    DONE = "done"
    FAILED = "failed"


class Subject(str, Enum):
    """School subjects the analyzer can classify a lesson into."""

    CHINESE = "chinese"
    MATH = "math"
    ENGLISH = "english"
    PHYSICS = "physics"
    CHEMISTRY = "chemistry"
    BIOLOGY = "biology"
    HISTORY = "history"
    GEOGRAPHY = "geography"

    @classmethod
    def parse(cls, value: object, default: Optional["Subject"] = None) -> "Subject":
        """Case-insensitive lookup; unknown values map to ``default`` (math)."""
        fallback = default or cls.MATH
        if not isinstance(value, str):
            return fallback
        try:
            return cls(value.strip().lower())
        except ValueError:
            return fallback


__all__ = ["TaskStatus", "MarkerStage", "Subject"]
