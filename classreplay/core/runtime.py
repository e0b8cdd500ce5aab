"""
Runtime environment checks: required tools and writable directories.
"""

import os
import shutil
from pathlib import Path
from typing import Dict, Iterable, List

MEDIA_TOOLS = ("ffmpeg", "ffprobe")


def parse_bool_env(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def missing_runtime_tools(tools: Iterable[str]) -> List[str]:
    return [tool for tool in tools if shutil.which(tool) is None]


def assert_directory_writable(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)
    if not path.is_dir():
        raise RuntimeError(f"Required directory is missing: {path}")

    probe = path / f".write_probe_{os.getpid()}.tmp"
    try:
        probe.write_text("ok", encoding="utf-8")
        probe.unlink(missing_ok=True)
    except OSError as exc:
        raise RuntimeError(f"Directory is not writable: {path}") from exc


def run_startup_runtime_checks(*, directories: Dict[str, Path], strict_tools: bool) -> Dict[str, object]:
    """
    Check the data directories and the media tools.

    Directory problems always raise. Missing tools raise only when ``strict_tools``
    is set; otherwise the service starts and marker videos are skipped.
    """
    report: Dict[str, object] = {"directories": {}, "tools": {}, "ok": True}

    for name, path in directories.items():
        assert_directory_writable(path)
        report["directories"][name] = {"path": str(path), "writable": True}

    missing = missing_runtime_tools(MEDIA_TOOLS)
    report["tools"] = {"required": list(MEDIA_TOOLS), "missing": missing}
    if missing:
        report["ok"] = False
        if strict_tools:
            raise RuntimeError("Missing required runtime tools: " + ", ".join(missing))

    return report
