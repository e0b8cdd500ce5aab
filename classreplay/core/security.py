"""
Security utilities for uploaded files and served artifacts
Prevents path traversal through upload names and artifact URLs
"""

import os
import re
from pathlib import Path
from typing import Optional

from .logging import get_logger

logger = get_logger(__name__, component="security")

_IDENTIFIER_PATTERN = re.compile(r"^[a-f0-9]{8}-?[a-f0-9]{4}-?[a-f0-9]{4}-?[a-f0-9]{4}-?[a-f0-9]{12}$", re.IGNORECASE)


def sanitize_filename(filename: str) -> str:
    """
    Strip directory components and unsafe characters from a client filename.

    Raises:
        ValueError: If nothing usable is left

    Example:
        >>> sanitize_filename("../../etc/passwd")
        'passwd'
        >>> sanitize_filename("lesson\\x00.mp3")
        'lesson.mp3'
    """
    original = filename
    filename = os.path.basename(filename.replace("\\", "/"))
    filename = filename.replace("\x00", "").lstrip(".")
    filename = "".join(char for char in filename if 31 < ord(char) != 127)
    for char in '<>:"|?*':
        filename = filename.replace(char, "")
    filename = filename.encode("ascii", "ignore").decode("ascii").strip()[:255]

    if not filename or filename.replace(".", "") == "":
        logger.warning("Filename sanitization resulted in empty string", extra={"original": original})
        raise ValueError("Invalid filename after sanitization")

    if filename != original:
        logger.info("Filename sanitized", extra={"original": original, "sanitized": filename})
    return filename


def validate_identifier(identifier: str) -> bool:
    """Task and marker ids are UUIDs, with or without hyphens."""
    is_valid = bool(_IDENTIFIER_PATTERN.match(identifier or ""))
    if not is_valid:
        logger.warning("Invalid identifier format", extra={"identifier": identifier})
    return is_valid


def validate_path_within_directory(path: Path, allowed_directory: Path) -> bool:
    """Resolve both paths and check that ``path`` stays inside ``allowed_directory``."""
    try:
        path = path.resolve()
        allowed_directory = allowed_directory.resolve()
    except (OSError, RuntimeError) as e:
        logger.warning("Path resolution failed", extra={"path": str(path), "error": str(e)})
        return False

    try:
        path.relative_to(allowed_directory)
        return True
    except ValueError:
        logger.warning("Path traversal attempt detected", extra={
            "path": str(path),
            "allowed_directory": str(allowed_directory),
        })
        return False


def secure_file_path(base_dir: Path, *path_parts: str) -> Optional[Path]:
    """
    Join ``path_parts`` under ``base_dir``, or return None if any part tries to escape it.

    Example:
        >>> secure_file_path(Path("/outputs"), "abc", "slide_1.jpg")
        PosixPath('/outputs/abc/slide_1.jpg')
        >>> secure_file_path(Path("/outputs"), "..", "passwd") is None
        True
    """
    parts = []
    for part in path_parts:
        if not part or ".." in part or "/" in part or "\\" in part or "\x00" in part:
            logger.warning("Path traversal attempt blocked", extra={
                "base_dir": str(base_dir),
                "suspicious_part": part,
            })
            return None
        parts.append(part)

    if not parts:
        return None

    path = base_dir.joinpath(*parts)
    if not validate_path_within_directory(path, base_dir):
        return None
    return path
