"""
JSON recovery utilities for language-model responses.

Models wrap JSON in prose or markdown fences, leave trailing commas and put raw
newlines inside string values. The helpers here locate and repair such
payloads; callers decide which ones to try and in what order.
"""

import json
import re
from typing import Any, Dict, List, Optional, Tuple

_TRAILING_COMMA = re.compile(r",(\s*[}\]])")
_ESCAPE_SEQUENCE = re.compile(r'\\(["\\/bfnrt]|u[0-9a-fA-F]{4})?')
_BARE_CONTROL_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}


def strip_code_fences(text: str) -> str:
    """Drop markdown fence lines (```json ... ```) and keep their content."""
    if not text:
        return ""
    normalized = text.strip()
    if "```" not in normalized:
        return normalized
    lines = [line for line in normalized.split("\n") if not line.strip().startswith("```")]
    return "\n".join(lines).strip()


def _scan_balanced(text: str):
    """Yield (start, end) spans of top-level balanced {...} / [...] blocks."""
    in_string = False
    escape = False
    stack: List[str] = []
    start_idx: Optional[int] = None

    for i, ch in enumerate(text):
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
            continue

        if ch in "{[":
            if not stack:
                start_idx = i
            stack.append(ch)
        elif ch in "}]":
            if not stack:
                continue
            if (stack[-1] == "{") == (ch == "}"):
                stack.pop()
                if not stack and start_idx is not None:
                    yield start_idx, i + 1
                    start_idx = None
            else:
                # Mismatched closing; reset state.
                stack.clear()
                start_idx = None


def extract_first_balanced_json(text: str, opener: str = "{") -> Optional[str]:
    """Return the first balanced block starting with ``opener`` ('{' or '[')."""
    if not text:
        return None
    for start, end in _scan_balanced(text):
        if text[start] == opener:
            return text[start:end]
    return None


def extract_largest_balanced_json(text: str, expect_array: bool = False) -> Optional[str]:
    """Return the largest balanced object (or array, with ``expect_array``)."""
    if not text:
        return None
    opener = "[" if expect_array else "{"
    best: Optional[str] = None
    for start, end in _scan_balanced(text):
        if text[start] != opener:
            continue
        if best is None or end - start > len(best):
            best = text[start:end]
    return best


def _split_string_literals(text: str) -> List[Tuple[bool, str]]:
    """Split into (is_string_literal, chunk) pieces; literals keep their quotes."""
    pieces: List[Tuple[bool, str]] = []
    buf: List[str] = []
    in_string = False
    escape = False

    for ch in text:
        if in_string:
            buf.append(ch)
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                pieces.append((True, "".join(buf)))
                buf = []
                in_string = False
            continue
        if ch == '"':
            if buf:
                pieces.append((False, "".join(buf)))
            buf = [ch]
            in_string = True
            continue
        buf.append(ch)

    if buf:
        # An unterminated literal is still treated as a literal.
        pieces.append((in_string, "".join(buf)))
    return pieces


def trim_to_outermost_brackets(text: str) -> str:
    """Cut everything before the first opening and after the last closing bracket."""
    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    end = max(text.rfind("}"), text.rfind("]"))
    if not starts or end == -1 or end < min(starts):
        return text
    return text[min(starts):end + 1]


def strip_trailing_commas(text: str) -> str:
    """Remove commas that directly precede a closing bracket, outside string values."""
    return "".join(
        chunk if is_literal else _TRAILING_COMMA.sub(r"\1", chunk)
        for is_literal, chunk in _split_string_literals(text)
    )


def escape_bare_newlines(text: str) -> str:
    """Escape raw newlines, carriage returns and tabs inside string values."""
    out = []
    for is_literal, chunk in _split_string_literals(text):
        if is_literal:
            chunk = "".join(_BARE_CONTROL_ESCAPES.get(ch, ch) for ch in chunk)
        out.append(chunk)
    return "".join(out)


def fix_json_escapes(text: str) -> str:
    """Double lone backslashes that do not start a valid JSON escape."""
    return _ESCAPE_SEQUENCE.sub(lambda m: m.group(0) if m.group(1) else "\\\\", text)


def repair_json_text(text: str) -> str:
    """
    Apply every textual repair in order.

    Fences are stripped, the payload is trimmed to its outermost brackets,
    trailing commas are dropped, then bare newlines and invalid escapes inside
    string values are fixed.
    """
    repaired = trim_to_outermost_brackets(strip_code_fences(text))
    repaired = strip_trailing_commas(repaired)
    repaired = escape_bare_newlines(repaired)
    return fix_json_escapes(repaired)


def loads_or_none(candidate: Optional[str]) -> Any:
    """``json.loads`` that returns None instead of raising."""
    if not candidate:
        return None
    try:
        return json.loads(candidate)
    except (json.JSONDecodeError, ValueError):
        return None


def parse_json_object(text: str) -> Optional[Dict[str, Any]]:
    """
    Parse the first JSON object found in a model response.

    Tries the first balanced object as-is, then the same object after repair.
    Returns None when neither parses to a dict.
    """
    if not text:
        return None
    cleaned = strip_code_fences(text)
    candidate = extract_first_balanced_json(cleaned, "{")

    for attempt in (candidate, repair_json_text(candidate) if candidate else None, repair_json_text(cleaned)):
        parsed = loads_or_none(attempt)
        if isinstance(parsed, dict):
            return parsed
    return None
