"""
Subtitle timing and subtitle file formats
"""

from .formats import (
    build_ass_document,
    build_srt_document,
    format_ass_time,
    format_srt_time,
    write_ass_file,
    write_srt_file,
)
from .timing import (
    COMMA_FLUSH_RATIO,
    MAX_CUE_CHARS,
    MAX_CUE_SECONDS,
    MIN_CUE_SECONDS,
    rescale_subtitles,
    resolve_slide_subtitles,
    split_by_comma,
    split_sentences,
    time_subtitles,
)

__all__ = [
    "build_ass_document",
    "build_srt_document",
    "format_ass_time",
    "format_srt_time",
    "write_ass_file",
    "write_srt_file",
    "COMMA_FLUSH_RATIO",
    "MAX_CUE_CHARS",
    "MAX_CUE_SECONDS",
    "MIN_CUE_SECONDS",
    "rescale_subtitles",
    "resolve_slide_subtitles",
    "split_by_comma",
    "split_sentences",
    "time_subtitles",
]
