import uuid

import pytest

from classreplay.core.security import (
    sanitize_filename,
    secure_file_path,
    validate_identifier,
    validate_path_within_directory,
)


class TestSanitizeFilename:
    def test_basic_sanitization(self):
        assert sanitize_filename("lesson.mp3") == "lesson.mp3"

    def test_path_traversal_removal(self):
        assert sanitize_filename("../../etc/passwd") == "passwd"
        assert sanitize_filename("..\\windows\\system32") == "system32"

    def test_null_byte_injection(self):
        assert sanitize_filename("file.mp3\x00.exe") == "file.mp3.exe"

    def test_dangerous_characters(self):
        assert sanitize_filename('lesson"one.mp3') == "lessonone.mp3"
        assert sanitize_filename("lesson|one.mp3") == "lessonone.mp3"

    def test_non_ascii_characters_dropped(self):
        assert sanitize_filename("数学课lesson.wav") == "lesson.wav"

    def test_empty_result_raises_error(self):
        with pytest.raises(ValueError):
            sanitize_filename("   ...   ")
        with pytest.raises(ValueError):
            sanitize_filename("课堂录音")


class TestValidateIdentifier:
    def test_hyphenated_uuid(self):
        assert validate_identifier(str(uuid.uuid4())) is True

    def test_hex_uuid(self):
        assert validate_identifier(uuid.uuid4().hex) is True

    def test_invalid_format(self):
        assert validate_identifier("invalid-id") is False
        assert validate_identifier(f"{uuid.uuid4().hex}/../passwd") is False
        assert validate_identifier("") is False


class TestValidatePathWithinDirectory:
    def test_safe_path(self, tmp_path):
        tmp_path = tmp_path.resolve()
        safe_file = tmp_path / "safe.txt"
        safe_file.touch()
        assert validate_path_within_directory(safe_file, tmp_path) is True

    def test_path_traversal(self, tmp_path):
        tmp_path = tmp_path.resolve()
        assert validate_path_within_directory(tmp_path.parent / "outside.txt", tmp_path) is False


class TestSecureFilePath:
    def test_constructs_valid_path(self, tmp_path):
        marker_id = uuid.uuid4().hex
        assert secure_file_path(tmp_path, marker_id, "slide_1.jpg") == tmp_path / marker_id / "slide_1.jpg"

    def test_prevents_traversal(self, tmp_path):
        assert secure_file_path(tmp_path, "..", "outside.txt") is None
        assert secure_file_path(tmp_path, "abc", "../secret") is None
        assert secure_file_path(tmp_path, "abc", "a\\b") is None

    def test_requires_parts(self, tmp_path):
        assert secure_file_path(tmp_path) is None
        assert secure_file_path(tmp_path, "") is None
