"""
Marker processing

Drives one marker through the whole pipeline (extract, transcribe, analyze,
script, slides, video) and runs a batch of markers one after another. A
failing marker is recorded and the batch moves on to the next one.
"""

import asyncio
import math
import shutil
import uuid
from pathlib import Path
from typing import Any, AsyncIterator, Callable, List, Optional, Sequence, Tuple, Union

from ....config import PipelineSettings
from ....core import MarkerWindowError, get_logger, set_marker_index
from ....models import (
    BatchCompleted,
    BatchEvent,
    MarkerEvent,
    MarkerFailure,
    MarkerOutcome,
    MarkerResult,
    MarkerStage,
    MarkerUpdate,
    ProgressEvent,
    SlideArtifact,
    SlideView,
    SubtitleCue,
    VideoView,
)
from ....models.events import (
    MARKER_COMPLETED,
    MARKER_FAILED,
    MARKER_STARTED,
    MarkerUpdateCallback,
    ProgressCallback,
    UpdateCallback,
)
from ..analysis import KnowledgeAnalyzer
from ..assembly import SlideForVideo, VideoAssembler
from ..media.ffmpeg import MediaToolkit
from ..script_generation import ScriptGenerator
from ..slides import SlideSynthesizer
from ..transcription import Transcriber
from .progress import BatchProgress, MarkerProgress

logger = get_logger(__name__, component="marker_processor")

PathLike = Union[str, Path]

FINAL_VIDEO_NAME = "final_video.mp4"
SEGMENT_NAME = "audio_segment.mp3"

_BATCH_DONE = object()


def _error_text(error: BaseException) -> str:
    return str(error) or type(error).__name__


def _guarded(callback: Optional[Callable[..., None]], name: str) -> Optional[Callable[..., None]]:
    """Wrap an observer callback so an exception inside it is logged, not raised."""
    if callback is None:
        return None

    def call(*args: Any) -> None:
        try:
            callback(*args)
        except Exception as e:
            logger.error(f"{name} callback raised", extra={"error": _error_text(e)})

    return call


class MarkerProcessor:
    """
    Turns markers on a recording into narrated slide videos.

    Args:
        media: ffmpeg/ffprobe wrapper shared by every stage
        transcriber: Chunked speech recognition
        analyzer: Knowledge point extraction
        script_generator: Slide deck generation
        slide_synthesizer: Per-slide image and narration
        output_dir: Parent of the per-marker artifact directories
        temp_dir: Parent of the per-marker scratch directories
        settings: Window sizes and video resolution
        file_url_prefix: URL prefix artifacts are served under
    """

    def __init__(
        self,
        media: MediaToolkit,
        transcriber: Transcriber,
        analyzer: KnowledgeAnalyzer,
        script_generator: ScriptGenerator,
        slide_synthesizer: SlideSynthesizer,
        output_dir: Path,
        temp_dir: Path,
        settings: Optional[PipelineSettings] = None,
        file_url_prefix: str = "/api/files",
    ):
        self.media = media
        self.transcriber = transcriber
        self.analyzer = analyzer
        self.script_generator = script_generator
        self.slide_synthesizer = slide_synthesizer
        self.output_dir = Path(output_dir)
        self.temp_dir = Path(temp_dir)
        self.settings = settings or PipelineSettings()
        self.file_url_prefix = file_url_prefix.rstrip("/")

    def file_url(self, marker_id: str, path: Path) -> str:
        return f"{self.file_url_prefix}/{marker_id}/{Path(path).name}"

    async def extraction_window(self, audio_path: PathLike, marker_time: float) -> Tuple[float, float]:
        """
        The ``(start, end)`` seconds of the recording that belong to a marker.

        Raises:
            MediaToolError: The recording's duration cannot be read
            MarkerWindowError: The marker is not a finite time or the window is empty
        """
        if not math.isfinite(marker_time):
            raise MarkerWindowError(f"Marker time must be a finite number, got {marker_time}")
        duration = await self.media.probe_duration(audio_path, default=None)
        start = max(0.0, marker_time - self.settings.window_before_seconds)
        end = min(duration, marker_time + self.settings.window_after_seconds)
        if end <= start:
            raise MarkerWindowError(
                f"Marker at {marker_time}s lies outside the recording ({duration:.2f}s long)"
            )
        return start, end

    async def process_marker(
        self,
        audio_path: PathLike,
        marker_time: float,
        on_progress: Optional[ProgressCallback] = None,
        on_update: Optional[UpdateCallback] = None,
    ) -> MarkerResult:
        """
        Run the full pipeline for one marker.

        The marker's scratch directory is removed whether it succeeds or not.

        Raises:
            MarkerWindowError: The marker lies outside the recording
            MediaToolError: Extraction, clip rendering or concatenation failed
        """
        audio_path = Path(audio_path)
        marker_id = uuid.uuid4().hex
        output_dir = self.output_dir / marker_id
        temp_dir = self.temp_dir / marker_id
        output_dir.mkdir(parents=True, exist_ok=True)
        temp_dir.mkdir(parents=True, exist_ok=True)

        progress = MarkerProgress(on_progress)

        def update(stage: MarkerStage, status: str, **data: Any) -> None:
            if on_update:
                on_update(MarkerUpdate(stage=stage.value, status=status, data=data))

        logger.info("Processing marker", extra={
            "marker_id": marker_id,
            "marker_time": marker_time,
            "audio_file": str(audio_path),
        })

        stage = MarkerStage.PENDING
        try:
            # Extraction
            stage = MarkerStage.EXTRACTING
            progress.enter(stage, "正在截取音频片段...")
            update(stage, "processing", marker_id=marker_id, marker_time=marker_time)
            start, end = await self.extraction_window(audio_path, marker_time)
            segment_path = temp_dir / SEGMENT_NAME
            await self.media.extract_segment(audio_path, segment_path, start, end - start)
            update(stage, "completed", start=start, end=end)

            # Transcription
            stage = MarkerStage.TRANSCRIBING
            progress.enter(stage, "正在识别语音内容...")
            update(stage, "processing")
            transcript = await self.transcriber.transcribe(
                segment_path,
                0.0,
                end - start,
                on_progress=lambda percent: progress.within(
                    MarkerStage.TRANSCRIBING, percent / 100, "正在识别语音内容..."
                ),
                work_dir=temp_dir,
            )
            update(stage, "completed", transcript_preview=transcript[:200])

            # Analysis
            stage = MarkerStage.ANALYZING
            progress.enter(stage, "正在分析知识点...")
            update(stage, "processing")
            analysis = await self.analyzer.analyze(transcript)
            update(stage, "completed", **analysis.to_dict())

            # Script
            stage = MarkerStage.SCRIPTING
            progress.enter(stage, "正在生成教学脚本...")
            update(stage, "processing")
            script = await self.script_generator.generate_script(
                analysis.knowledge_point,
                analysis.summary,
                analysis.key_points,
            )
            update(stage, "completed", slides_count=len(script.slides), from_template=script.from_template)

            # Slides
            stage = MarkerStage.SYNTHESIZING_SLIDES
            slide_count = len(script.slides)
            progress.enter(stage, "正在生成教学图片和语音...")
            update(stage, "processing", slides_count=slide_count)
            artifacts = await self.slide_synthesizer.synthesize_slides(
                script.slides,
                output_dir,
                on_slide_done=lambda index, _artifact: progress.within(
                    MarkerStage.SYNTHESIZING_SLIDES,
                    (index + 1) / slide_count,
                    f"幻灯片 {index + 1}/{slide_count} 已完成",
                ),
            )
            update(
                stage,
                "completed",
                images=sum(1 for artifact in artifacts if artifact.image_succeeded),
                audios=sum(1 for artifact in artifacts if artifact.audio_succeeded),
            )

            # Video
            stage = MarkerStage.ASSEMBLING_VIDEO
            progress.enter(stage, "正在合成视频...")
            update(stage, "processing")
            video, video_cues = await self._assemble_video(
                marker_id, script.slides, artifacts, output_dir, temp_dir, progress,
            )
            update(stage, "completed", video_path=video.path if video else None)

            progress.finish("处理完成！")
            update(MarkerStage.DONE, "completed")
        except Exception as e:
            logger.error("Marker processing failed", extra={
                "marker_id": marker_id,
                "stage": stage.value,
                "error": _error_text(e),
            })
            update(MarkerStage.FAILED, "failed", failed_stage=stage.value, error=_error_text(e))
            raise
        finally:
            shutil.rmtree(temp_dir, ignore_errors=True)

        slides = tuple(
            self._slide_view(marker_id, slide, artifact, video_cues[artifact.index] if video_cues else None)
            for slide, artifact in zip(script.slides, artifacts)
        )
        logger.info("Marker processed", extra={
            "marker_id": marker_id,
            "knowledge_point": analysis.knowledge_point,
            "slides": len(slides),
            "video": video.path if video else None,
        })
        return MarkerResult(
            marker_id=marker_id,
            marker_time=marker_time,
            knowledge_point=analysis.knowledge_point,
            summary=analysis.summary,
            subject=analysis.subject,
            key_points=analysis.key_points,
            transcript=transcript,
            slides=slides,
            video=video,
            output_dir=str(output_dir),
        )

    async def _assemble_video(
        self,
        marker_id: str,
        slides,
        artifacts: List[SlideArtifact],
        output_dir: Path,
        temp_dir: Path,
        progress: MarkerProgress,
    ) -> Tuple[Optional[VideoView], List[List[SubtitleCue]]]:
        """The video view and, per slide, the cues as timed in the rendered video."""
        if not self.media.is_available():
            logger.warning("ffmpeg not installed, skipping video assembly", extra={"marker_id": marker_id})
            return None, []

        assembler = VideoAssembler(
            self.media,
            temp_dir,
            width=self.settings.video_width,
            height=self.settings.video_height,
        )
        assembled = await assembler.assemble(
            [
                SlideForVideo(
                    image_path=artifact.image_path,
                    audio_path=artifact.audio_path,
                    script=slide.script,
                    subtitle=slide.subtitle,
                    subtitles=slide.subtitles,
                )
                for slide, artifact in zip(slides, artifacts)
            ],
            output_dir / FINAL_VIDEO_NAME,
            on_progress=lambda percent, message: progress.within(
                MarkerStage.ASSEMBLING_VIDEO, percent / 100, message
            ),
        )
        video = VideoView(
            path=str(assembled.path),
            url=self.file_url(marker_id, assembled.path),
            duration_seconds=assembled.duration,
            subtitles_burned=assembled.subtitles_burned,
        )
        return video, assembled.slide_cues

    def _slide_view(
        self,
        marker_id: str,
        slide,
        artifact: SlideArtifact,
        video_cues: Optional[List[SubtitleCue]] = None,
    ) -> SlideView:
        """``video_cues`` replace the synthesis-time cues so the API matches the burned-in subtitles."""
        return SlideView(
            index=artifact.index + 1,
            title=slide.title,
            script=slide.script,
            subtitle=slide.subtitle,
            subtitles=tuple(artifact.subtitles if video_cues is None else video_cues),
            image_path=str(artifact.image_path),
            image_url=self.file_url(marker_id, artifact.image_path),
            audio_path=str(artifact.audio_path),
            audio_url=self.file_url(marker_id, artifact.audio_path),
            audio_duration_ms=artifact.audio_duration_ms,
            image_succeeded=artifact.image_succeeded,
            audio_succeeded=artifact.audio_succeeded,
        )

    async def process_all_markers(
        self,
        audio_path: PathLike,
        marker_times: Sequence[float],
        on_progress: Optional[ProgressCallback] = None,
        on_marker_update: Optional[MarkerUpdateCallback] = None,
    ) -> List[MarkerOutcome]:
        """
        Process every marker in order.

        Never raises for a failing marker: its slot in the returned list holds
        a ``MarkerFailure`` instead of a ``MarkerResult``.
        """
        notify = _guarded(on_marker_update, "marker update")
        batch = BatchProgress(len(marker_times), _guarded(on_progress, "progress"))
        total = len(marker_times)
        results: List[MarkerOutcome] = []

        for index, marker_time in enumerate(marker_times):
            set_marker_index(index)
            if notify:
                notify(index, MarkerUpdate(stage=MARKER_STARTED, status="processing", data={"marker_time": marker_time}))
            batch.marker_started(index, f"处理标记点 {index + 1}/{total}...")

            def forward_update(update: MarkerUpdate, marker_index: int = index) -> None:
                if notify:
                    notify(marker_index, update)

            try:
                result = await self.process_marker(
                    audio_path,
                    marker_time,
                    on_progress=lambda event, marker_index=index: batch.marker_progress(marker_index, event),
                    on_update=forward_update,
                )
            except Exception as e:
                failure = MarkerFailure(marker_time=marker_time, error=_error_text(e))
                results.append(failure)
                if notify:
                    notify(index, MarkerUpdate(stage=MARKER_FAILED, status="failed", data=failure.to_dict()))
                continue

            results.append(result)
            if notify:
                notify(index, MarkerUpdate(stage=MARKER_COMPLETED, status="completed", data=result.to_dict()))

        set_marker_index(None)
        batch.finish("所有标记点处理完成")
        logger.info("Batch finished", extra={
            "markers": total,
            "failed": sum(1 for outcome in results if not outcome.success),
        })
        return results

    async def stream_all_markers(
        self,
        audio_path: PathLike,
        marker_times: Sequence[float],
    ) -> AsyncIterator[BatchEvent]:
        """
        Same as ``process_all_markers``, as an event stream.

        Yields ``ProgressEvent`` and ``MarkerEvent`` items while the batch runs,
        then one ``BatchCompleted`` carrying the outcomes. Closing the stream
        early cancels the batch.
        """
        queue: "asyncio.Queue[Any]" = asyncio.Queue()

        def on_progress(event: ProgressEvent) -> None:
            queue.put_nowait(event)

        def on_marker_update(index: int, update: MarkerUpdate) -> None:
            queue.put_nowait(MarkerEvent(index=index, update=update))

        task = asyncio.create_task(
            self.process_all_markers(audio_path, marker_times, on_progress, on_marker_update)
        )
        task.add_done_callback(lambda _: queue.put_nowait(_BATCH_DONE))
        try:
            while True:
                event = await queue.get()
                if event is _BATCH_DONE:
                    break
                yield event
            yield BatchCompleted(results=task.result())
        finally:
            if not task.done():
                task.cancel()
