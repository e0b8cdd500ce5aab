"""
Chunked speech recognition

A marker's audio window is cut into fixed-length chunks that are recognized
in small concurrent batches. Each chunk keeps its index, so the transcript is
stitched back in time order no matter which request finishes first. A chunk
that fails is replaced by a placeholder line instead of failing the whole
transcription.
"""

import asyncio
import base64
import math
import tempfile
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from ....core import get_logger
from ....models import AudioSegment
from ...clients import SpeechRecognitionClient
from ..media.ffmpeg import MediaToolkit

logger = get_logger(__name__, component="transcriber")

# Share of the progress range spent on chunk recognition; the rest marks completion.
CHUNK_PROGRESS_SHARE = 80
FAILED_CHUNK_TEMPLATE = "[segment {number} recognition failed]"

TranscriptionProgress = Callable[[int], None]


@dataclass
class ChunkResult:
    index: int
    text: str
    succeeded: bool


def plan_chunks(source_path: Path, start: float, end: float, chunk_seconds: float) -> List[AudioSegment]:
    """Cut ``[start, end)`` into ``chunk_seconds`` pieces; the last may be shorter."""
    span = end - start
    if span <= 0:
        return []
    count = math.ceil(span / chunk_seconds)
    return [
        AudioSegment(
            source_path=source_path,
            start_offset_seconds=start + index * chunk_seconds,
            duration_seconds=min(chunk_seconds, end - (start + index * chunk_seconds)),
            index=index,
        )
        for index in range(count)
    ]


class Transcriber:
    """
    Transcribes an audio window through the speech recognition client.

    Args:
        asr_client: Recognizes one base64-encoded chunk at a time
        media: Toolkit used to cut chunks out of the source file
        chunk_seconds: Length of each chunk
        concurrency: Chunks recognized at once; a batch is fully awaited
            before the next one starts
        work_dir: Where chunk files are written (system temp dir by default)
    """

    def __init__(
        self,
        asr_client: SpeechRecognitionClient,
        media: MediaToolkit,
        chunk_seconds: float = 60.0,
        concurrency: int = 3,
        work_dir: Optional[Path] = None,
    ):
        self.asr_client = asr_client
        self.media = media
        self.chunk_seconds = chunk_seconds
        self.concurrency = max(1, concurrency)
        self.work_dir = Path(work_dir) if work_dir else Path(tempfile.gettempdir())

    async def transcribe(
        self,
        segment_path: Path,
        start: float,
        end: float,
        on_progress: Optional[TranscriptionProgress] = None,
        work_dir: Optional[Path] = None,
    ) -> str:
        """
        Return the transcript of ``[start, end)`` of ``segment_path``, chunks joined by newlines.

        ``work_dir`` overrides the directory chunk files are written to.
        """
        chunks = plan_chunks(Path(segment_path), start, end, self.chunk_seconds)
        if not chunks:
            return ""

        work_dir = Path(work_dir) if work_dir else self.work_dir
        work_dir.mkdir(parents=True, exist_ok=True)
        batch_id = uuid.uuid4().hex[:8]
        results: List[ChunkResult] = []
        completed = 0

        logger.info("Transcribing audio window", extra={
            "chunk_count": len(chunks),
            "start": start,
            "end": end,
        })

        def report_chunk_done() -> None:
            nonlocal completed
            completed += 1
            if on_progress:
                on_progress(round(completed / len(chunks) * CHUNK_PROGRESS_SHARE))

        for batch_start in range(0, len(chunks), self.concurrency):
            batch = chunks[batch_start:batch_start + self.concurrency]
            batch_results = await asyncio.gather(
                *(self._recognize_chunk(chunk, work_dir, batch_id, report_chunk_done) for chunk in batch)
            )
            results.extend(batch_results)

        results.sort(key=lambda result: result.index)
        failed = sum(1 for result in results if not result.succeeded)
        if failed:
            logger.warning("Some chunks failed recognition", extra={"failed": failed, "total": len(results)})

        if on_progress:
            on_progress(100)
        return "\n".join(result.text for result in results)

    async def _recognize_chunk(
        self,
        chunk: AudioSegment,
        work_dir: Path,
        batch_id: str,
        on_done: Callable[[], None],
    ) -> ChunkResult:
        chunk_path = work_dir / f"chunk_{batch_id}_{chunk.index}.mp3"
        try:
            await self.media.extract_segment(
                chunk.source_path,
                chunk_path,
                chunk.start_offset_seconds,
                chunk.duration_seconds,
            )
            audio_base64 = base64.b64encode(chunk_path.read_bytes()).decode("ascii")
            result = await self.asr_client.recognize(audio_base64)
            logger.debug("Chunk recognized", extra={
                "chunk_index": chunk.index,
                "silent": result.silent,
                "chars": len(result.text),
            })
            return ChunkResult(index=chunk.index, text=result.text, succeeded=True)
        except Exception as e:
            logger.error("Chunk recognition failed", extra={"chunk_index": chunk.index, "error": str(e)})
            return ChunkResult(
                index=chunk.index,
                text=FAILED_CHUNK_TEMPLATE.format(number=chunk.index + 1),
                succeeded=False,
            )
        finally:
            chunk_path.unlink(missing_ok=True)
            on_done()
