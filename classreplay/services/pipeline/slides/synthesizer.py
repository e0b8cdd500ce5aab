"""
Slide synthesis

For every slide of a deck: an illustration and a narration track, generated
concurrently, plus the subtitle cues timed against the narration actually
produced. Slides run one after another with a short pause between them to
stay under the providers' rate limits.

Neither sub-task can fail a slide. A failed illustration becomes a locally
drawn placeholder and a failed narration becomes a stretch of silence.
"""

import asyncio
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ....core import get_logger
from ....models import Slide, SlideArtifact
from ..audio import SpeechSynthesizer
from ..images import SlideIllustrator, create_placeholder_image
from ..media.ffmpeg import MediaToolkit
from ..subtitles import resolve_slide_subtitles

logger = get_logger(__name__, component="slide_synthesizer")

SlideDoneCallback = Callable[[int, SlideArtifact], None]


def slide_image_path(output_dir: Path, index: int) -> Path:
    return output_dir / f"slide_{index + 1}.jpg"


def slide_audio_path(output_dir: Path, index: int) -> Path:
    return output_dir / f"slide_{index + 1}_audio.mp3"


class SlideSynthesizer:
    """
    Produces the image and audio files of each slide.

    Args:
        illustrator: Generates slide images
        speech: Synthesizes narration, splitting long scripts
        media: Used for the silent fallback track
        inter_slide_delay: Pause between consecutive slides (seconds)
        silent_seconds: Length of the fallback track when narration fails
        image_size: Size of the placeholder image
    """

    def __init__(
        self,
        illustrator: SlideIllustrator,
        speech: SpeechSynthesizer,
        media: MediaToolkit,
        inter_slide_delay: float = 0.5,
        silent_seconds: float = 5.0,
        image_size: Tuple[int, int] = (1920, 1080),
    ):
        self.illustrator = illustrator
        self.speech = speech
        self.media = media
        self.inter_slide_delay = inter_slide_delay
        self.silent_seconds = silent_seconds
        self.image_size = image_size

    async def synthesize_slides(
        self,
        slides: List[Slide],
        output_dir: Path,
        on_slide_done: Optional[SlideDoneCallback] = None,
    ) -> List[SlideArtifact]:
        """Synthesize ``slides`` in order; artifacts come back in slide order."""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        artifacts = []
        for index, slide in enumerate(slides):
            artifact = await self.synthesize_slide(slide, index, output_dir)
            artifacts.append(artifact)
            if on_slide_done:
                on_slide_done(index, artifact)
            if index < len(slides) - 1 and self.inter_slide_delay > 0:
                await asyncio.sleep(self.inter_slide_delay)
        return artifacts

    async def synthesize_slide(self, slide: Slide, index: int, output_dir: Path) -> SlideArtifact:
        output_dir = Path(output_dir)
        (image_path, image_error), (audio_path, duration_ms, audio_error) = await asyncio.gather(
            self._render_image(slide, index, output_dir),
            self._render_audio(slide, index, output_dir),
        )

        subtitles = resolve_slide_subtitles(slide.script, slide.subtitles, slide.subtitle, duration_ms / 1000)
        logger.info("Slide synthesized", extra={
            "slide_index": index,
            "image_ok": image_error is None,
            "audio_ok": audio_error is None,
            "audio_duration_ms": duration_ms,
            "cues": len(subtitles),
        })
        return SlideArtifact(
            index=index,
            image_path=image_path,
            audio_path=audio_path,
            audio_duration_ms=duration_ms,
            subtitles=subtitles,
            image_succeeded=image_error is None,
            audio_succeeded=audio_error is None,
            image_error=image_error,
            audio_error=audio_error,
        )

    async def _render_image(self, slide: Slide, index: int, output_dir: Path) -> Tuple[Path, Optional[str]]:
        image_path = slide_image_path(output_dir, index)
        try:
            return await self.illustrator.generate_to_file(slide.image_prompt, image_path), None
        except Exception as e:
            logger.warning("Image generation failed, drawing placeholder", extra={
                "slide_index": index,
                "error": str(e),
            })
            placeholder = await asyncio.to_thread(
                create_placeholder_image, image_path, slide.title, slide.subtitle, self.image_size,
            )
            return placeholder, str(e)

    async def _render_audio(self, slide: Slide, index: int, output_dir: Path) -> Tuple[Path, int, Optional[str]]:
        audio_path = slide_audio_path(output_dir, index)
        try:
            result = await self.speech.synthesize_speech(slide.script, audio_path)
            return result.path, result.duration_ms, None
        except Exception as e:
            logger.warning("Speech synthesis failed, using silence", extra={
                "slide_index": index,
                "error": str(e),
            })
            try:
                await self.media.generate_silence(audio_path, self.silent_seconds)
            except Exception as silence_error:
                logger.error("Could not create silent audio", extra={
                    "slide_index": index,
                    "error": str(silence_error),
                })
            return audio_path, round(self.silent_seconds * 1000), str(e)
