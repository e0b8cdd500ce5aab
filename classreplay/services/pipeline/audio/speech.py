"""
Narration synthesis with long-text support

Texts within the service's byte limit go out in one request. Longer texts are
split, synthesized piece by piece (failed pieces are skipped) and joined back
into a single file with a stream-copy concat.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from ....core import SpeechSynthesisError, get_logger
from ...clients import SpeechSynthesisClient
from ..media.ffmpeg import MediaToolkit
from .text_splitter import split_text_for_tts, utf8_length

logger = get_logger(__name__, component="speech_synthesizer")


@dataclass
class SpeechResult:
    path: Path
    duration_ms: int
    segments: int = 1


class SpeechSynthesizer:
    def __init__(
        self,
        tts_client: SpeechSynthesisClient,
        media: MediaToolkit,
        byte_limit: int = 1024,
        segment_chars: int = 300,
    ):
        self.tts_client = tts_client
        self.media = media
        self.byte_limit = byte_limit
        self.segment_chars = segment_chars

    async def synthesize_speech(self, text: str, output_path: Union[str, Path]) -> SpeechResult:
        """
        Write narration for ``text`` to ``output_path``.

        Raises:
            SpeechSynthesisError: Empty text, or every piece of a long text failed
            BoundaryCallError: The single request for a short text failed
        """
        text = (text or "").strip()
        output_path = Path(output_path)
        if not text:
            raise SpeechSynthesisError("No text to synthesize")
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if utf8_length(text) <= self.byte_limit:
            audio = await self.tts_client.synthesize(text)
            output_path.write_bytes(audio.data)
            duration_ms = audio.duration_ms if audio.duration_ms is not None else await self._probe_ms(output_path)
            return SpeechResult(path=output_path, duration_ms=duration_ms)

        return await self._synthesize_long_text(text, output_path)

    async def _probe_ms(self, path: Path) -> int:
        return round(await self.media.probe_duration(path) * 1000)

    async def _synthesize_long_text(self, text: str, output_path: Path) -> SpeechResult:
        segments = split_text_for_tts(text, self.segment_chars, self.byte_limit)
        logger.info("Synthesizing long text in segments", extra={
            "segments": len(segments),
            "text_bytes": utf8_length(text),
        })

        piece_paths: List[Path] = []
        total_ms = 0
        try:
            for index, segment in enumerate(segments):
                piece_path = output_path.with_name(f"{output_path.stem}_part{index}.mp3")
                try:
                    audio = await self.tts_client.synthesize(segment)
                except Exception as e:
                    logger.warning("Segment synthesis failed, skipping", extra={
                        "segment_index": index,
                        "error": str(e),
                    })
                    continue
                piece_path.write_bytes(audio.data)
                piece_paths.append(piece_path)
                total_ms += audio.duration_ms if audio.duration_ms is not None else await self._probe_ms(piece_path)

            if not piece_paths:
                raise SpeechSynthesisError(f"All {len(segments)} text segments failed synthesis")

            await self.media.concat_audio(piece_paths, output_path)
        finally:
            for piece_path in piece_paths:
                piece_path.unlink(missing_ok=True)

        return SpeechResult(path=output_path, duration_ms=total_ms, segments=len(piece_paths))
