"""
Text splitting for the speech synthesis request size limit.
"""

import re
from typing import List

_SENTENCE_PUNCTUATION = re.compile(r"([。！？；\n]+)")
_COMMAS = ("，", ",")


def utf8_length(text: str) -> int:
    return len(text.encode("utf-8"))


def _sentence_units(text: str) -> List[str]:
    """Sentences with their closing punctuation attached."""
    units: List[str] = []
    for piece in _SENTENCE_PUNCTUATION.split(text):
        if not piece:
            continue
        if _SENTENCE_PUNCTUATION.fullmatch(piece) and units:
            units[-1] += piece
        else:
            units.append(piece)
    return units


def force_split(segment: str, max_chars: int, byte_limit: int) -> List[str]:
    """
    Cut an oversized segment into windows of at most ``max_chars`` characters
    and ``byte_limit`` UTF-8 bytes, ending each window after its last comma
    when there is one.
    """
    pieces: List[str] = []
    start = 0
    while start < len(segment):
        end = min(start + max_chars, len(segment))
        while end > start + 1 and utf8_length(segment[start:end]) > byte_limit:
            end -= 1
        if end < len(segment):
            comma = max(segment.rfind(comma_char, start, end) for comma_char in _COMMAS)
            if comma > start:
                end = comma + 1
        piece = segment[start:end].strip()
        if piece:
            pieces.append(piece)
        start = end
    return pieces


def split_text_for_tts(text: str, max_chars: int = 300, byte_limit: int = 1024) -> List[str]:
    """
    Split text into synthesis requests.

    Whole sentences are packed into segments of up to ``max_chars`` characters;
    any segment still over ``byte_limit`` bytes is force-split.
    """
    segments: List[str] = []
    current = ""
    for unit in _sentence_units(text):
        if len(current) + len(unit) <= max_chars:
            current += unit
        else:
            if current.strip():
                segments.append(current.strip())
            current = unit
    if current.strip():
        segments.append(current.strip())

    result: List[str] = []
    for segment in segments:
        if utf8_length(segment) > byte_limit:
            result.extend(force_split(segment, max_chars, byte_limit))
        else:
            result.append(segment)
    return [segment for segment in result if segment]
