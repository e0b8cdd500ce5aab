from .fallback import build_template_script
from .generator import ScriptGenerator
from .normalization import DEFAULT_IMAGE_PROMPT, STYLE_TAG, normalize_image_prompt, normalize_slides
from .parsing import (
    SLIDE_PARSE_STRATEGIES,
    parse_repaired_json,
    parse_slides,
    parse_slides_array,
    parse_slides_object,
)

__all__ = [
    "ScriptGenerator",
    "build_template_script",
    "normalize_image_prompt",
    "normalize_slides",
    "DEFAULT_IMAGE_PROMPT",
    "STYLE_TAG",
    "SLIDE_PARSE_STRATEGIES",
    "parse_slides",
    "parse_slides_object",
    "parse_slides_array",
    "parse_repaired_json",
]
