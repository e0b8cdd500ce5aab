"""
Pipeline data model

Records passed between the marker pipeline stages. Results handed back to
callers (``MarkerResult``, ``MarkerFailure``) are frozen.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .status import Subject


@dataclass(frozen=True)
class AudioSegment:
    """A chunk window of a recording, sent to speech recognition on its own."""
    source_path: Path
    start_offset_seconds: float
    duration_seconds: float
    index: int = 0


@dataclass(frozen=True)
class SubtitleCue:
    """One subtitle line; ``start`` is relative to the slide or the whole video."""
    text: str
    start: float
    duration: float

    @property
    def end(self) -> float:
        return self.start + self.duration

    def shifted(self, offset: float) -> "SubtitleCue":
        return SubtitleCue(text=self.text, start=self.start + offset, duration=self.duration)

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "start": round(self.start, 3), "duration": round(self.duration, 3)}


@dataclass(frozen=True)
class KnowledgeAnalysis:
    knowledge_point: str
    summary: str
    subject: Subject = Subject.MATH
    key_points: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "knowledge_point": self.knowledge_point,
            "summary": self.summary,
            "subject": self.subject.value,
            "key_points": list(self.key_points),
        }


@dataclass
class Slide:
    """
    One slide of a generated deck.

    ``subtitles`` holds author-supplied cues when the language model timed the
    narration itself; it stays None otherwise.
    """
    title: str
    script: str = ""
    image_prompt: str = ""
    subtitle: str = ""
    subtitles: Optional[List[SubtitleCue]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "script": self.script,
            "image_prompt": self.image_prompt,
            "subtitle": self.subtitle,
            "subtitles": [cue.to_dict() for cue in self.subtitles] if self.subtitles is not None else None,
        }


@dataclass
class PPTScript:
    slides: List[Slide]
    from_template: bool = False


@dataclass
class SlideArtifact:
    """Files produced for one slide; ``index`` is zero-based."""
    index: int
    image_path: Path
    audio_path: Path
    audio_duration_ms: int
    subtitles: List[SubtitleCue] = field(default_factory=list)
    image_succeeded: bool = True
    audio_succeeded: bool = True
    image_error: Optional[str] = None
    audio_error: Optional[str] = None


@dataclass(frozen=True)
class SlideView:
    """A slide as reported to API clients; ``index`` is one-based."""
    index: int
    title: str
    script: str
    subtitle: str
    subtitles: Tuple[SubtitleCue, ...]
    image_path: str
    image_url: str
    audio_path: str
    audio_url: str
    audio_duration_ms: int
    image_succeeded: bool = True
    audio_succeeded: bool = True

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["subtitles"] = [cue.to_dict() for cue in self.subtitles]
        return data


@dataclass(frozen=True)
class VideoView:
    path: str
    url: str
    duration_seconds: float
    subtitles_burned: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MarkerResult:
    """Everything produced for one marker."""
    marker_id: str
    marker_time: float
    knowledge_point: str
    summary: str
    subject: Subject
    key_points: Tuple[str, ...]
    transcript: str
    slides: Tuple[SlideView, ...]
    video: Optional[VideoView]
    output_dir: str
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    success: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "marker_id": self.marker_id,
            "marker_time": self.marker_time,
            "success": self.success,
            "knowledge_point": self.knowledge_point,
            "summary": self.summary,
            "subject": self.subject.value,
            "key_points": list(self.key_points),
            "transcript": self.transcript,
            "slides": [slide.to_dict() for slide in self.slides],
            "video": self.video.to_dict() if self.video else None,
            "output_dir": self.output_dir,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class MarkerFailure:
    """A marker that could not be processed; the batch carries on without it."""
    marker_time: float
    error: str
    success: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"marker_time": self.marker_time, "success": self.success, "error": self.error}


MarkerOutcome = Union[MarkerResult, MarkerFailure]


__all__ = [
    "AudioSegment",
    "SubtitleCue",
    "KnowledgeAnalysis",
    "Slide",
    "PPTScript",
    "SlideArtifact",
    "SlideView",
    "VideoView",
    "MarkerResult",
    "MarkerFailure",
    "MarkerOutcome",
]
