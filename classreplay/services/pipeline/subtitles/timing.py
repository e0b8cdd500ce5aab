"""
Subtitle timing

Turns a narration script and the length of its audio into timed cues without
any forced alignment: sentences get time in proportion to their length, long
sentences are broken at commas, and the cues always tile the audio exactly.
"""

import re
from typing import List, Optional, Sequence

from ....models import SubtitleCue

MIN_CUE_SECONDS = 1.5
MAX_CUE_SECONDS = 8.0
MAX_CUE_CHARS = 25
# A comma-terminated clause is flushed once it reaches this share of MAX_CUE_CHARS.
COMMA_FLUSH_RATIO = 0.7
DEFAULT_AUTHOR_CUE_SECONDS = 2.0

_CJK_TERMINATORS = "。！？；"
# CJK terminators and newlines always end a sentence; ASCII ones only before
# whitespace or the end of the text, so "3.14" stays whole.
_SENTENCE_END = re.compile(r"([。！？；]+|\n+|[.!?;]+(?=\s|$))")
_COMMA = re.compile(r"([，,])")


def split_sentences(text: str) -> List[str]:
    """Split into sentences, keeping terminal punctuation and dropping newlines."""
    sentences: List[str] = []
    current = ""
    for part in _SENTENCE_END.split(text):
        if not part:
            continue
        if _SENTENCE_END.fullmatch(part):
            if "\n" not in part:
                current += part
            current = current.strip()
            if current and not _is_punctuation_only(current):
                sentences.append(current)
            current = ""
        else:
            current += part
    current = current.strip()
    if current and not _is_punctuation_only(current):
        sentences.append(current)
    return sentences


def _is_punctuation_only(text: str) -> bool:
    return all(ch in _CJK_TERMINATORS or ch in ".!?;" or ch.isspace() for ch in text)


def split_by_comma(text: str, max_length: int = MAX_CUE_CHARS) -> List[str]:
    """
    Break a long sentence into clauses at commas.

    Clauses accumulate until adding the next one would pass ``max_length``;
    a clause ending in a comma is flushed early once the accumulation reaches
    ``COMMA_FLUSH_RATIO`` of ``max_length``.
    """
    flush_at = max_length * COMMA_FLUSH_RATIO
    parts: List[str] = []
    current = ""

    for piece in _COMMA.split(text):
        if not piece:
            continue
        if _COMMA.fullmatch(piece):
            current += piece
            if len(current) >= flush_at:
                parts.append(current.strip())
                current = ""
        elif current and len(current) + len(piece) > max_length:
            parts.append(current.strip())
            current = piece
        else:
            current += piece

    if current.strip():
        parts.append(current.strip())
    parts = [part for part in parts if part]
    return parts or [text]


def _join(left: str, right: str) -> str:
    if left and left[-1].isascii() and right and right[0].isascii():
        return f"{left} {right}"
    return left + right


def _regroup(parts: List[str], limit: int) -> List[str]:
    """Merge consecutive parts so that at most ``limit`` remain."""
    if len(parts) <= limit:
        return parts
    limit = max(1, limit)
    grouped = []
    for group_index in range(limit):
        lo = round(group_index * len(parts) / limit)
        hi = round((group_index + 1) * len(parts) / limit)
        merged = ""
        for part in parts[lo:hi]:
            merged = _join(merged, part)
        grouped.append(merged)
    return grouped


def _allocate(lengths: Sequence[int], total_duration: float) -> List[float]:
    """
    Proportional durations: all but the last clamped to the cue bounds, the
    last taking whatever remains so the sum is exactly ``total_duration``.

    Callers guarantee ``len(lengths) * MIN_CUE_SECONDS <= total_duration`` when
    there is more than one entry.
    """
    count = len(lengths)
    if count == 1:
        return [total_duration]

    total_chars = sum(lengths)
    leading = [
        min(MAX_CUE_SECONDS, max(MIN_CUE_SECONDS, total_duration * length / total_chars))
        for length in lengths[:-1]
    ]

    budget = total_duration - MIN_CUE_SECONDS
    if sum(leading) > budget:
        # The minimum clamp overspent; shrink the excess above the minimum so
        # the final cue still gets MIN_CUE_SECONDS.
        floor_total = MIN_CUE_SECONDS * len(leading)
        excess = [duration - MIN_CUE_SECONDS for duration in leading]
        excess_total = sum(excess)
        spare = max(0.0, budget - floor_total)
        leading = [
            MIN_CUE_SECONDS + (spare * share / excess_total if excess_total else 0.0)
            for share in excess
        ]

    return leading + [total_duration - sum(leading)]


def _split_evenly(parts: List[str], duration: float, start: float, is_final: bool) -> List[SubtitleCue]:
    """Divide one sentence's time evenly across its clauses."""
    parts = _regroup(parts, int(duration // MIN_CUE_SECONDS) or 1)
    share = duration / len(parts)
    if is_final:
        # Clauses before the very last cue must also respect MAX_CUE_SECONDS.
        share = min(share, MAX_CUE_SECONDS)

    cues = []
    offset = start
    for position, part in enumerate(parts):
        last = position == len(parts) - 1
        cue_duration = (start + duration - offset) if last else share
        cues.append(SubtitleCue(text=part, start=offset, duration=cue_duration))
        offset += cue_duration
    return cues


def time_subtitles(text: Optional[str], total_duration: float) -> List[SubtitleCue]:
    """
    Split ``text`` into cues that cover ``[0, total_duration]`` exactly.

    Every cue but the final one lasts between MIN_CUE_SECONDS and
    MAX_CUE_SECONDS. Blank text, a non-positive duration or text without any
    characters yields no cues.
    """
    if not text or not text.strip() or not total_duration or total_duration <= 0:
        return []

    sentences = split_sentences(text)
    if not sentences:
        return []

    # Too many sentences for the available time: fuse neighbours.
    sentences = _regroup(sentences, int(total_duration // MIN_CUE_SECONDS) or 1)
    durations = _allocate([len(sentence) for sentence in sentences], total_duration)

    cues: List[SubtitleCue] = []
    current = 0.0
    for index, (sentence, duration) in enumerate(zip(sentences, durations)):
        is_final = index == len(sentences) - 1
        if is_final:
            duration = total_duration - current
        if len(sentence) > MAX_CUE_CHARS:
            cues.extend(_split_evenly(split_by_comma(sentence), duration, current, is_final))
        else:
            cues.append(SubtitleCue(text=sentence, start=current, duration=duration))
        current += duration
    return cues


def rescale_subtitles(cues: Sequence[SubtitleCue], total_duration: float) -> List[SubtitleCue]:
    """
    Stretch author-supplied cues so their durations sum to ``total_duration``.

    Start times are recomputed back to back. A zero duration sum uses a
    scale factor of 1.
    """
    durations = [cue.duration if cue.duration and cue.duration > 0 else DEFAULT_AUTHOR_CUE_SECONDS for cue in cues]
    authored_total = sum(durations)
    scale = total_duration / authored_total if authored_total > 0 else 1.0

    rescaled = []
    current = 0.0
    for cue, duration in zip(cues, durations):
        scaled = duration * scale
        rescaled.append(SubtitleCue(text=cue.text, start=current, duration=scaled))
        current += scaled
    return rescaled


def resolve_slide_subtitles(
    script: Optional[str],
    authored: Optional[Sequence[SubtitleCue]],
    caption: Optional[str],
    duration_seconds: float,
) -> List[SubtitleCue]:
    """
    Pick the cues for one slide.

    Priority: cues timed from the narration script, then the author's cues
    rescaled to the audio, then the single caption spanning the slide.
    """
    if script and script.strip():
        cues = time_subtitles(script, duration_seconds)
        if cues:
            return cues
    if authored:
        return rescale_subtitles(authored, duration_seconds)
    if caption and caption.strip() and duration_seconds > 0:
        return [SubtitleCue(text=caption.strip(), start=0.0, duration=duration_seconds)]
    return []
