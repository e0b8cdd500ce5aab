"""
Subtitle file writers (ASS for burn-in, SRT as a sidecar).
"""

from pathlib import Path
from typing import Iterable, Union

from ....models import SubtitleCue

ASS_FONT = "Microsoft YaHei"
ASS_FONT_SIZE = 56

# BorderStyle 3 draws an opaque box in BackColour (&H80 alpha = half transparent).
ASS_HEADER = f"""[Script Info]
Title: Lesson Slide Subtitles
ScriptType: v4.00+
WrapStyle: 0
ScaledBorderAndShadow: yes
PlayResX: 1920
PlayResY: 1080

[V4+ Styles]
Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding
Style: Default,{ASS_FONT},{ASS_FONT_SIZE},&H00FFFFFF,&H000000FF,&H80000000,&H80000000,-1,0,0,0,100,100,0,0,3,3,0,2,50,50,80,1

[Events]
Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
"""


def format_ass_time(seconds: float) -> str:
    """``H:MM:SS.cc``"""
    centis = max(0, round(seconds * 100))
    hours, centis = divmod(centis, 360000)
    minutes, centis = divmod(centis, 6000)
    secs, centis = divmod(centis, 100)
    return f"{hours}:{minutes:02d}:{secs:02d}.{centis:02d}"


def format_srt_time(seconds: float) -> str:
    """``HH:MM:SS,mmm``"""
    millis = max(0, round(seconds * 1000))
    hours, millis = divmod(millis, 3600000)
    minutes, millis = divmod(millis, 60000)
    secs, millis = divmod(millis, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


def _ass_text(text: str) -> str:
    # Braces would start override blocks.
    return text.replace("\r", "").replace("\n", "\\N").replace("{", "(").replace("}", ")")


def build_ass_document(cues: Iterable[SubtitleCue]) -> str:
    lines = [ASS_HEADER]
    for cue in cues:
        lines.append(
            f"Dialogue: 0,{format_ass_time(cue.start)},{format_ass_time(cue.end)},Default,,0,0,0,,{_ass_text(cue.text)}\n"
        )
    return "".join(lines)


def build_srt_document(cues: Iterable[SubtitleCue]) -> str:
    blocks = []
    for number, cue in enumerate(cues, start=1):
        blocks.append(f"{number}\n{format_srt_time(cue.start)} --> {format_srt_time(cue.end)}\n{cue.text}\n")
    return "\n".join(blocks)


def write_ass_file(cues: Iterable[SubtitleCue], output_path: Union[str, Path]) -> Path:
    path = Path(output_path)
    path.write_text(build_ass_document(cues), encoding="utf-8")
    return path


def write_srt_file(cues: Iterable[SubtitleCue], output_path: Union[str, Path]) -> Path:
    path = Path(output_path)
    path.write_text(build_srt_document(cues), encoding="utf-8")
    return path
