"""
Slide normalization

Raw slide dicts from the model are turned into ``Slide`` records with every
required field present.
"""

from typing import Any, Dict, List, Optional

from ....models import Slide, SubtitleCue

STYLE_TAG = "疯狂动物城风格插图，"
STYLE_MARKERS = ("疯狂动物城", "zootopia")
DEFAULT_IMAGE_PROMPT = "疯狂动物城风格插图，迪士尼皮克斯画质，朱迪兔子在温馨明亮的教室里"


def normalize_image_prompt(prompt: Optional[str]) -> str:
    """Make sure the prompt names the house illustration style. Idempotent."""
    prompt = (prompt or "").strip()
    if not prompt:
        return DEFAULT_IMAGE_PROMPT
    lowered = prompt.lower()
    if not any(marker in lowered for marker in STYLE_MARKERS):
        return f"{STYLE_TAG}{prompt}"
    return prompt


def default_title(index: int) -> str:
    return f"第{index + 1}页"


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value.strip() if isinstance(value, str) else str(value).strip()


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if number >= 0 else None


def parse_authored_subtitles(value: Any) -> Optional[List[SubtitleCue]]:
    """Keep well-formed ``{text, start, duration}`` entries; None if none survive."""
    if not isinstance(value, list):
        return None
    cues = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        text = _text(entry.get("text"))
        if not text:
            continue
        start = _number(entry.get("start"))
        duration = _number(entry.get("duration"))
        cues.append(SubtitleCue(text=text, start=start or 0.0, duration=duration or 0.0))
    return cues or None


def normalize_slide(raw: Dict[str, Any], index: int) -> Slide:
    return Slide(
        title=_text(raw.get("title")) or default_title(index),
        script=_text(raw.get("script")),
        image_prompt=normalize_image_prompt(_text(raw.get("imagePrompt") or raw.get("image_prompt"))),
        subtitle=_text(raw.get("subtitle")),
        subtitles=parse_authored_subtitles(raw.get("subtitles")),
    )


def normalize_slides(raw_slides: List[Any]) -> List[Slide]:
    """Drop non-object entries and normalize the rest, numbering titles by position."""
    entries = [entry for entry in raw_slides if isinstance(entry, dict)]
    return [normalize_slide(entry, index) for index, entry in enumerate(entries)]
