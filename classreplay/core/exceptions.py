"""
Core Exceptions
Base exceptions shared by the pipeline, the service clients and the API.
"""

from typing import Optional, Sequence


class ClassReplayError(Exception):
    """Base exception for all application errors."""
    pass


class PipelineError(ClassReplayError):
    """Base exception for processing pipeline errors."""
    pass


class InfrastructureError(ClassReplayError):
    """Base exception for infrastructure errors (AI services, storage)."""
    pass


class MediaToolError(PipelineError):
    """An ffmpeg/ffprobe invocation failed or could not be started."""

    def __init__(self, command: Sequence[str], returncode: Optional[int], stderr: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        tool = self.command[0] if self.command else "media tool"
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else "no output"
        super().__init__(f"{tool} failed (exit {returncode}): {detail}")


class MarkerWindowError(PipelineError):
    """The marker's extraction window lies outside the recording."""
    pass


class TaskSetupError(PipelineError):
    """A batch could not start, e.g. the uploaded audio is unreadable."""
    pass


class BoundaryCallError(InfrastructureError):
    """A call to an external AI service failed or returned an error payload."""

    def __init__(self, service: str, detail: str, status_code: Optional[int] = None):
        self.service = service
        self.detail = detail
        self.status_code = status_code
        prefix = f"{service} error" if status_code is None else f"{service} error {status_code}"
        super().__init__(f"{prefix}: {detail}")


class SpeechSynthesisError(InfrastructureError):
    """No narration audio could be produced for a text."""
    pass
