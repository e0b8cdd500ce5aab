"""
Tests for narration synthesis and text splitting
"""

import pytest

from classreplay.core import BoundaryCallError, SpeechSynthesisError
from classreplay.services.pipeline.audio import SpeechSynthesizer, force_split, split_text_for_tts, utf8_length
from tests.fakes import FakeMedia, FakeTts

# 500 CJK characters = 1500 UTF-8 bytes
LONG_TEXT = ("直角三角形两条直角边的平方和等于斜边的平方。" * 23)[:499] + "。"


class TestTextSplitter:
    def test_utf8_length(self):
        assert utf8_length("abc") == 3
        assert utf8_length("勾股") == 6

    def test_short_text_single_segment(self):
        assert split_text_for_tts("你好。再见。") == ["你好。再见。"]

    def test_packs_whole_sentences(self):
        sentence = "这是一句十个字的话。"
        segments = split_text_for_tts(sentence * 5, max_chars=25)
        assert segments == [sentence * 2, sentence * 2, sentence]

    def test_long_text_respects_byte_limit(self):
        assert utf8_length(LONG_TEXT) == 1500

        segments = split_text_for_tts(LONG_TEXT)

        assert len(segments) >= 2
        assert all(utf8_length(segment) <= 1024 for segment in segments)
        assert "".join(segments) == LONG_TEXT

    def test_force_split_prefers_commas(self):
        text = "甲" * 8 + "，" + "乙" * 8
        assert force_split(text, max_chars=12, byte_limit=1024) == ["甲" * 8 + "，", "乙" * 8]

    def test_force_split_by_bytes(self):
        pieces = force_split("字" * 20, max_chars=300, byte_limit=30)
        assert pieces == ["字" * 10, "字" * 10]

    def test_sentence_without_punctuation_is_force_split(self):
        text = "字" * 400
        segments = split_text_for_tts(text)
        assert all(utf8_length(segment) <= 1024 for segment in segments)
        assert "".join(segments) == text


class TestSpeechSynthesizer:
    @pytest.mark.asyncio
    async def test_short_text_single_request(self, tmp_path):
        tts = FakeTts()
        synthesizer = SpeechSynthesizer(tts, FakeMedia())

        result = await synthesizer.synthesize_speech("你好，同学们。", tmp_path / "slide_1_audio.mp3")

        assert tts.texts == ["你好，同学们。"]
        assert result.path.read_bytes() == "你好，同学们。".encode()
        assert result.duration_ms == 700
        assert result.segments == 1

    @pytest.mark.asyncio
    async def test_probes_when_service_omits_duration(self, tmp_path):
        media = FakeMedia(durations={"narration.mp3": 3.25})
        synthesizer = SpeechSynthesizer(FakeTts(report_duration=False), media)

        result = await synthesizer.synthesize_speech("你好。", tmp_path / "narration.mp3")

        assert result.duration_ms == 3250

    @pytest.mark.asyncio
    async def test_long_text_is_split_and_joined(self, tmp_path):
        tts = FakeTts()
        media = FakeMedia()
        synthesizer = SpeechSynthesizer(tts, media)
        output = tmp_path / "slide_1_audio.mp3"

        result = await synthesizer.synthesize_speech(LONG_TEXT, output)

        assert len(tts.texts) >= 2
        assert all(utf8_length(text) <= 1024 for text in tts.texts)
        assert result.segments == len(tts.texts)
        assert result.duration_ms == sum(len(text) * 100 for text in tts.texts)
        assert output.read_bytes() == "".join(tts.texts).encode()
        assert len(media.calls_to("concat_audio")) == 1
        assert list(tmp_path.iterdir()) == [output]

    @pytest.mark.asyncio
    async def test_failed_segments_are_skipped(self, tmp_path):
        segments = split_text_for_tts(LONG_TEXT)
        tts = FakeTts(fail_texts=[segments[0]])
        synthesizer = SpeechSynthesizer(tts, FakeMedia())

        result = await synthesizer.synthesize_speech(LONG_TEXT, tmp_path / "out.mp3")

        assert result.segments == len(segments) - 1
        assert result.duration_ms == sum(len(text) * 100 for text in segments[1:])

    @pytest.mark.asyncio
    async def test_all_segments_failing_raises(self, tmp_path):
        synthesizer = SpeechSynthesizer(FakeTts(fail=True), FakeMedia())

        with pytest.raises(SpeechSynthesisError):
            await synthesizer.synthesize_speech(LONG_TEXT, tmp_path / "out.mp3")

        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_short_text_failure_propagates(self, tmp_path):
        synthesizer = SpeechSynthesizer(FakeTts(fail=True), FakeMedia())
        with pytest.raises(BoundaryCallError):
            await synthesizer.synthesize_speech("你好。", tmp_path / "out.mp3")

    @pytest.mark.asyncio
    async def test_empty_text(self, tmp_path):
        synthesizer = SpeechSynthesizer(FakeTts(), FakeMedia())
        with pytest.raises(SpeechSynthesisError):
            await synthesizer.synthesize_speech("   ", tmp_path / "out.mp3")
