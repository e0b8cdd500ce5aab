"""
Parsing utilities for model responses
"""

from .json_parser import (
    escape_bare_newlines,
    extract_first_balanced_json,
    extract_largest_balanced_json,
    fix_json_escapes,
    loads_or_none,
    parse_json_object,
    repair_json_text,
    strip_code_fences,
    strip_trailing_commas,
    trim_to_outermost_brackets,
)

__all__ = [
    "escape_bare_newlines",
    "extract_first_balanced_json",
    "extract_largest_balanced_json",
    "fix_json_escapes",
    "loads_or_none",
    "parse_json_object",
    "repair_json_text",
    "strip_code_fences",
    "strip_trailing_commas",
    "trim_to_outermost_brackets",
]
