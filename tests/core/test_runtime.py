from unittest.mock import patch

import pytest

from classreplay.core import BoundaryCallError, MediaToolError
from classreplay.core.runtime import missing_runtime_tools, parse_bool_env, run_startup_runtime_checks


class TestParseBoolEnv:
    def test_truthy_values(self):
        for value in ("1", "true", "YES", " on "):
            assert parse_bool_env(value) is True

    def test_falsy_and_default(self):
        assert parse_bool_env("0") is False
        assert parse_bool_env("nope", default=True) is False
        assert parse_bool_env(None, default=True) is True


class TestRuntimeChecks:
    def test_report_with_tools_present(self, tmp_path):
        with patch("classreplay.core.runtime.shutil.which", return_value="/usr/bin/tool"):
            report = run_startup_runtime_checks(directories={"output": tmp_path / "out"}, strict_tools=True)

        assert report["ok"] is True
        assert report["directories"]["output"]["writable"] is True
        assert (tmp_path / "out").is_dir()

    def test_missing_tools_lenient(self, tmp_path):
        with patch("classreplay.core.runtime.shutil.which", return_value=None):
            report = run_startup_runtime_checks(directories={"temp": tmp_path}, strict_tools=False)

        assert report["ok"] is False
        assert report["tools"]["missing"] == ["ffmpeg", "ffprobe"]

    def test_missing_tools_strict(self, tmp_path):
        with patch("classreplay.core.runtime.shutil.which", return_value=None):
            with pytest.raises(RuntimeError, match="ffmpeg"):
                run_startup_runtime_checks(directories={"temp": tmp_path}, strict_tools=True)

    def test_missing_runtime_tools(self):
        with patch("classreplay.core.runtime.shutil.which", side_effect=lambda tool: None if tool == "ffprobe" else "/bin/x"):
            assert missing_runtime_tools(["ffmpeg", "ffprobe"]) == ["ffprobe"]


class TestExceptions:
    def test_media_tool_error_message_uses_last_stderr_line(self):
        error = MediaToolError(["ffmpeg", "-i", "x"], 1, "header\nInvalid data found\n")
        assert str(error) == "ffmpeg failed (exit 1): Invalid data found"
        assert error.command == ["ffmpeg", "-i", "x"]

    def test_media_tool_error_without_output(self):
        assert str(MediaToolError(["ffprobe"], None)) == "ffprobe failed (exit None): no output"

    def test_boundary_call_error(self):
        error = BoundaryCallError("tts", "busy", 503)
        assert str(error) == "tts error 503: busy"
        assert error.service == "tts"
        assert str(BoundaryCallError("asr", "bad")) == "asr error: bad"
