"""
Pipeline tuning

Timing windows, batch sizes and media limits used by the marker pipeline.
Every value can be overridden with a ``CLASSREPLAY_<NAME>`` environment variable.
"""

import os
from dataclasses import dataclass, fields


@dataclass(frozen=True)
class PipelineSettings:
    # Extraction window around each marker (seconds)
    window_before_seconds: float = 300.0
    window_after_seconds: float = 180.0

    # Transcription
    chunk_seconds: float = 60.0
    asr_concurrency: int = 3

    # Slides
    inter_slide_delay_seconds: float = 0.5
    silent_fallback_seconds: float = 5.0

    # Speech synthesis limits
    tts_byte_limit: int = 1024
    tts_segment_chars: int = 300

    # Video
    video_width: int = 1920
    video_height: int = 1080

    @classmethod
    def from_env(cls) -> "PipelineSettings":
        overrides = {}
        for setting in fields(cls):
            raw = os.getenv(f"CLASSREPLAY_{setting.name.upper()}")
            if raw is None or raw.strip() == "":
                continue
            caster = int if setting.type in (int, "int") else float
            overrides[setting.name] = caster(raw)
        return cls(**overrides)
