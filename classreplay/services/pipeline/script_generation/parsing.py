"""
Slide-list recovery strategies

Each strategy takes the raw model response and returns a list of raw slide
entries, or None when it cannot. ``SLIDE_PARSE_STRATEGIES`` fixes the order
they are tried in.
"""

import re
from typing import Any, Callable, List, Optional, Tuple

from ...infrastructure.parsing import (
    extract_largest_balanced_json,
    loads_or_none,
    repair_json_text,
    strip_code_fences,
)

RawSlides = List[Any]
SlideParseStrategy = Callable[[str], Optional[RawSlides]]

_SLIDES_OBJECT = re.compile(r'\{[\s\S]*"slides"[\s\S]*\}')
_ARRAY = re.compile(r"\[[\s\S]*\]")


def _slides_of(parsed: Any) -> Optional[RawSlides]:
    if isinstance(parsed, dict) and isinstance(parsed.get("slides"), list):
        return parsed["slides"]
    return None


def parse_slides_object(text: str) -> Optional[RawSlides]:
    """An object with a ``slides`` list, anywhere in the response."""
    cleaned = strip_code_fences(text)
    match = _SLIDES_OBJECT.search(cleaned)
    candidates = [match.group(0) if match else None, extract_largest_balanced_json(cleaned)]
    for candidate in candidates:
        slides = _slides_of(loads_or_none(candidate))
        if slides is not None:
            return slides
    return None


def parse_slides_array(text: str) -> Optional[RawSlides]:
    """A bare JSON array of slides."""
    cleaned = strip_code_fences(text)
    match = _ARRAY.search(cleaned)
    candidates = [match.group(0) if match else None, extract_largest_balanced_json(cleaned, expect_array=True)]
    for candidate in candidates:
        parsed = loads_or_none(candidate)
        if isinstance(parsed, list):
            return parsed
    return None


def parse_repaired_json(text: str) -> Optional[RawSlides]:
    """Either shape, after trailing commas, bare newlines and bad escapes are fixed."""
    parsed = loads_or_none(repair_json_text(text))
    if isinstance(parsed, list):
        return parsed
    return _slides_of(parsed)


SLIDE_PARSE_STRATEGIES: Tuple[Tuple[str, SlideParseStrategy], ...] = (
    ("slides_object", parse_slides_object),
    ("bare_array", parse_slides_array),
    ("repaired_json", parse_repaired_json),
)


def parse_slides(text: str) -> Tuple[Optional[str], Optional[RawSlides]]:
    """Run the strategies in order; return the first non-empty result and its name."""
    if not text:
        return None, None
    for name, strategy in SLIDE_PARSE_STRATEGIES:
        slides = strategy(text)
        if slides:
            return name, slides
    return None, None
