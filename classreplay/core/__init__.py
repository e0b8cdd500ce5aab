"""
Core utilities shared across the application
"""

from .exceptions import (
    BoundaryCallError,
    ClassReplayError,
    InfrastructureError,
    MarkerWindowError,
    MediaToolError,
    PipelineError,
    SpeechSynthesisError,
    TaskSetupError,
)
from .logging import (
    LogTimer,
    clear_context,
    get_logger,
    set_marker_index,
    set_request_id,
    set_task_id,
    setup_logging,
)
from .runtime import missing_runtime_tools, parse_bool_env, run_startup_runtime_checks
from .security import (
    sanitize_filename,
    secure_file_path,
    validate_identifier,
    validate_path_within_directory,
)

__all__ = [
    # Exceptions
    "ClassReplayError",
    "PipelineError",
    "InfrastructureError",
    "MediaToolError",
    "MarkerWindowError",
    "TaskSetupError",
    "BoundaryCallError",
    "SpeechSynthesisError",
    # Logging
    "setup_logging",
    "get_logger",
    "set_request_id",
    "set_task_id",
    "set_marker_index",
    "clear_context",
    "LogTimer",
    # Runtime
    "parse_bool_env",
    "missing_runtime_tools",
    "run_startup_runtime_checks",
    # Security
    "sanitize_filename",
    "secure_file_path",
    "validate_identifier",
    "validate_path_within_directory",
]
