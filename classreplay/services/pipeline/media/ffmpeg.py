"""
Media toolkit
Every ffmpeg/ffprobe operation the pipeline needs, behind one injectable object

Components receive a ``MediaToolkit`` instead of spawning processes themselves,
so tests can substitute a fake and production code can swap the binaries.
A non-zero exit status is the only failure signal; it raises ``MediaToolError``.
"""

import asyncio
import shutil
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ....core import MediaToolError, get_logger

logger = get_logger(__name__, component="media_toolkit")

PathLike = Union[str, Path]

DEFAULT_DURATION_SECONDS = 5.0


def escape_concat_path(path: PathLike) -> str:
    """Quote a path for an ffmpeg concat list line."""
    return str(Path(path).resolve()).replace("'", "'\\''")


FILTER_OPTION_SPECIALS = "\\':"
FILTERGRAPH_SPECIALS = "\\'[],;"


def _backslash_escape(text: str, specials: str) -> str:
    return "".join(f"\\{char}" if char in specials else char for char in text)


def escape_filter_path(path: PathLike) -> str:
    """
    Escape a path for use as a filtergraph argument (``ass=...``).

    ffmpeg unescapes the value twice, once as a filter option and once as
    part of the filtergraph, so both levels are escaped.
    """
    value = _backslash_escape(str(path).replace("\\", "/"), FILTER_OPTION_SPECIALS)
    return _backslash_escape(value, FILTERGRAPH_SPECIALS)


class MediaToolkit:
    """
    Thin async wrapper around the ffmpeg and ffprobe binaries.

    The object is stateless apart from the binary names and can be shared by
    every component of every marker.
    """

    def __init__(
        self,
        ffmpeg_binary: str = "ffmpeg",
        ffprobe_binary: str = "ffprobe",
        timeout_seconds: Optional[float] = 600.0,
    ):
        self.ffmpeg_binary = ffmpeg_binary
        self.ffprobe_binary = ffprobe_binary
        self.timeout_seconds = timeout_seconds

    def is_available(self) -> bool:
        return shutil.which(self.ffmpeg_binary) is not None and shutil.which(self.ffprobe_binary) is not None

    async def _run(self, cmd: Sequence[str]) -> bytes:
        """Run a command, returning stdout; raise ``MediaToolError`` on a non-zero exit."""
        logger.debug("Running media command", extra={"command": " ".join(cmd)})
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise MediaToolError(cmd, None, str(e)) from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            process.kill()
            await process.wait()
            raise MediaToolError(cmd, None, f"timed out after {self.timeout_seconds}s") from e

        if process.returncode != 0:
            error_output = stderr.decode(errors="replace") if stderr else ""
            logger.error(f"{cmd[0]} failed", extra={
                "return_code": process.returncode,
                "stderr": error_output[-2000:],
            })
            raise MediaToolError(cmd, process.returncode, error_output)

        return stdout or b""

    async def probe_duration(self, path: PathLike, default: Optional[float] = DEFAULT_DURATION_SECONDS) -> float:
        """
        Duration in seconds.

        Returns ``default`` when probing fails, or raises ``MediaToolError``
        when ``default`` is None.
        """
        cmd = [
            self.ffprobe_binary,
            "-v", "error",
            "-show_entries", "format=duration",
            "-of", "default=noprint_wrappers=1:nokey=1",
            str(path),
        ]
        try:
            output = await self._run(cmd)
            duration = float(output.decode().strip())
        except (MediaToolError, ValueError) as e:
            if default is None:
                if isinstance(e, MediaToolError):
                    raise
                raise MediaToolError(cmd, 0, f"unreadable duration: {e}") from e
            logger.warning("Could not probe duration, using default", extra={
                "path": str(path),
                "default_seconds": default,
                "error": str(e),
            })
            return default
        if duration <= 0 and default is not None:
            return default
        return duration

    async def extract_segment(
        self,
        source_path: PathLike,
        output_path: PathLike,
        start: float,
        duration: float,
        *,
        sample_rate: int = 16000,
        channels: int = 1,
    ) -> Path:
        """Trim ``[start, start + duration)`` into a mono 16 kHz mp3 for recognition."""
        cmd = [
            self.ffmpeg_binary, "-y",
            "-ss", f"{start:.3f}",
            "-t", f"{duration:.3f}",
            "-i", str(source_path),
            "-acodec", "libmp3lame",
            "-ar", str(sample_rate),
            "-ac", str(channels),
            "-loglevel", "error",
            str(output_path),
        ]
        await self._run(cmd)
        return Path(output_path)

    async def generate_silence(self, output_path: PathLike, duration: float, sample_rate: int = 24000) -> Path:
        cmd = [
            self.ffmpeg_binary, "-y",
            "-f", "lavfi",
            "-i", f"anullsrc=r={sample_rate}:cl=mono",
            "-t", str(duration),
            "-acodec", "libmp3lame",
            "-loglevel", "error",
            str(output_path),
        ]
        await self._run(cmd)
        return Path(output_path)

    async def concat_audio(self, input_paths: List[PathLike], output_path: PathLike) -> Path:
        """Join audio files of identical encoding without re-encoding."""
        output_path = Path(output_path)
        list_file = output_path.with_name(f"{output_path.stem}_concat.txt")
        await self._concat(input_paths, output_path, list_file, ["-acodec", "copy"])
        return output_path

    async def render_slide_clip(
        self,
        image_path: PathLike,
        audio_path: PathLike,
        output_path: PathLike,
        *,
        width: int = 1920,
        height: int = 1080,
    ) -> Path:
        """Still-image clip whose length follows the audio track."""
        scale_pad = (
            f"scale={width}:{height}:force_original_aspect_ratio=decrease,"
            f"pad={width}:{height}:(ow-iw)/2:(oh-ih)/2:color=white"
        )
        cmd = [
            self.ffmpeg_binary, "-y",
            "-loop", "1",
            "-i", str(image_path),
            "-i", str(audio_path),
            "-c:v", "libx264",
            "-tune", "stillimage",
            "-c:a", "aac",
            "-b:a", "192k",
            "-ar", "44100",
            "-pix_fmt", "yuv420p",
            "-vf", scale_pad,
            "-shortest",
            "-loglevel", "error",
            str(output_path),
        ]
        await self._run(cmd)
        return Path(output_path)

    async def concat_videos(self, input_paths: List[PathLike], output_path: PathLike) -> Path:
        """Join clips: video stream copied, audio re-encoded to AAC 44.1 kHz."""
        output_path = Path(output_path)
        list_file = output_path.with_name(f"{output_path.stem}_concat.txt")
        await self._concat(
            input_paths,
            output_path,
            list_file,
            ["-c:v", "copy", "-c:a", "aac", "-b:a", "192k", "-ar", "44100"],
        )
        return output_path

    async def burn_subtitles(self, video_path: PathLike, subtitle_path: PathLike, output_path: PathLike) -> Path:
        cmd = [
            self.ffmpeg_binary, "-y",
            "-i", str(video_path),
            "-vf", f"ass={escape_filter_path(subtitle_path)}",
            "-c:a", "copy",
            "-loglevel", "error",
            str(output_path),
        ]
        await self._run(cmd)
        return Path(output_path)

    async def _concat(
        self,
        input_paths: List[PathLike],
        output_path: Path,
        list_file: Path,
        codec_args: List[str],
    ) -> None:
        if not input_paths:
            raise ValueError("Nothing to concatenate")

        list_file.write_text(
            "".join(f"file '{escape_concat_path(path)}'\n" for path in input_paths),
            encoding="utf-8",
        )
        cmd = [
            self.ffmpeg_binary, "-y",
            "-f", "concat",
            "-safe", "0",
            "-i", str(list_file),
            *codec_args,
            "-loglevel", "error",
            str(output_path),
        ]
        try:
            await self._run(cmd)
        finally:
            list_file.unlink(missing_ok=True)
