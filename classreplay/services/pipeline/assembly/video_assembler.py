"""
Video assembly

Turns the synthesized slides into one video: a still-image clip per slide,
the clips concatenated, and the subtitles of every slide shifted onto the
video timeline and burned in. Burn-in is best effort; when it fails the
merged video without subtitles is delivered. Clip rendering and
concatenation failures propagate.
"""

import shutil
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from ....core import MediaToolError, get_logger
from ....models import SubtitleCue
from ..media.ffmpeg import MediaToolkit
from ..subtitles import resolve_slide_subtitles, write_ass_file, write_srt_file

logger = get_logger(__name__, component="video_assembler")

AssemblyProgress = Callable[[int, str], None]

CLIP_PROGRESS_SHARE = 60


@dataclass
class SlideForVideo:
    image_path: Path
    audio_path: Path
    script: str = ""
    subtitle: str = ""
    subtitles: Optional[List[SubtitleCue]] = None


@dataclass
class AssembledVideo:
    path: Path
    duration: float
    slides_count: int
    subtitles_burned: bool = False
    cues: List[SubtitleCue] = field(default_factory=list)
    srt_path: Optional[Path] = None
    # Per-slide cues relative to each slide start, timed against the rendered clip
    slide_cues: List[List[SubtitleCue]] = field(default_factory=list)


class VideoAssembler:
    """
    Builds the final video of a marker.

    Args:
        media: ffmpeg wrapper
        work_dir: Scratch directory for clips and the pre-burn merge
        width: Output width in pixels
        height: Output height in pixels
    """

    def __init__(self, media: MediaToolkit, work_dir: Path, width: int = 1920, height: int = 1080):
        self.media = media
        self.work_dir = Path(work_dir)
        self.width = width
        self.height = height

    async def assemble(
        self,
        slides: List[SlideForVideo],
        output_path: Path,
        on_progress: Optional[AssemblyProgress] = None,
    ) -> AssembledVideo:
        if not slides:
            raise ValueError("No slides to assemble")

        def report(percent: int, message: str) -> None:
            if on_progress:
                on_progress(percent, message)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.work_dir.mkdir(parents=True, exist_ok=True)
        run_id = uuid.uuid4().hex[:8]

        clip_paths: List[Path] = []
        merged_path = self.work_dir / f"merged_{run_id}.mp4"
        cues: List[SubtitleCue] = []
        slide_cues: List[List[SubtitleCue]] = []
        timeline = 0.0

        try:
            for index, slide in enumerate(slides):
                report(round(index / len(slides) * CLIP_PROGRESS_SHARE), f"合成第 {index + 1}/{len(slides)} 页视频...")

                duration = await self.media.probe_duration(slide.audio_path)
                clip_path = self.work_dir / f"clip_{run_id}_{index}.mp4"
                await self.media.render_slide_clip(
                    slide.image_path,
                    slide.audio_path,
                    clip_path,
                    width=self.width,
                    height=self.height,
                )
                clip_paths.append(clip_path)

                timed = resolve_slide_subtitles(slide.script, slide.subtitles, slide.subtitle, duration)
                slide_cues.append(timed)
                cues.extend(cue.shifted(timeline) for cue in timed)
                timeline += duration
                logger.debug("Slide clip rendered", extra={"slide_index": index, "duration": duration})

            report(70, "合并视频片段...")
            await self.media.concat_videos(clip_paths, merged_path)

            report(85, "添加字幕...")
            burned = False
            srt_path = None
            if cues:
                srt_path = write_srt_file(cues, output_path.with_suffix(".srt"))
                burned = await self._burn_in(merged_path, cues, output_path, run_id)
            if not burned:
                shutil.move(str(merged_path), str(output_path))

            report(95, "清理临时文件...")
        finally:
            for clip_path in clip_paths:
                clip_path.unlink(missing_ok=True)
            merged_path.unlink(missing_ok=True)

        report(100, "视频合成完成")
        logger.info("Video assembled", extra={
            "output": str(output_path),
            "duration": round(timeline, 3),
            "slides": len(slides),
            "subtitles_burned": burned,
        })
        return AssembledVideo(
            path=output_path,
            duration=timeline,
            slides_count=len(slides),
            subtitles_burned=burned,
            cues=cues,
            srt_path=srt_path,
            slide_cues=slide_cues,
        )

    async def _burn_in(self, merged_path: Path, cues: List[SubtitleCue], output_path: Path, run_id: str) -> bool:
        ass_path = write_ass_file(cues, self.work_dir / f"subtitles_{run_id}.ass")
        try:
            await self.media.burn_subtitles(merged_path, ass_path, output_path)
            return True
        except MediaToolError as e:
            logger.warning("Subtitle burn-in failed, delivering video without subtitles", extra={"error": str(e)})
            output_path.unlink(missing_ok=True)
            return False
        finally:
            ass_path.unlink(missing_ok=True)
