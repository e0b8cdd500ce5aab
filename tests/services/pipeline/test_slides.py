"""
Tests for per-slide image and narration synthesis
"""

from unittest.mock import AsyncMock, patch

import pytest
from PIL import Image

from classreplay.models import Slide, SubtitleCue
from classreplay.services.pipeline.audio import SpeechSynthesizer
from classreplay.services.pipeline.images import SlideIllustrator
from classreplay.services.pipeline.slides import SlideSynthesizer, slide_audio_path, slide_image_path
from tests.fakes import FakeImageClient, FakeMedia, FakeTts

SLIDES = [
    Slide(title="勾股定理", script="今天我们学习了勾股定理。直角三角形两条直角边的平方和等于斜边的平方。", image_prompt="黑板", subtitle="勾股定理"),
    Slide(title="例题", script="三边分别是三、四、五。", image_prompt="黑板", subtitle="例题"),
]


def _synthesizer(media=None, image_fail=False, tts=None, delay=0.0):
    media = media or FakeMedia()
    return SlideSynthesizer(
        SlideIllustrator(FakeImageClient(fail=image_fail)),
        SpeechSynthesizer(tts or FakeTts(), media),
        media,
        inter_slide_delay=delay,
        silent_seconds=5.0,
        image_size=(160, 90),
    )


class TestPaths:
    def test_one_based_names(self, tmp_path):
        assert slide_image_path(tmp_path, 0).name == "slide_1.jpg"
        assert slide_audio_path(tmp_path, 2).name == "slide_3_audio.mp3"


class TestSlideSynthesizer:
    @pytest.mark.asyncio
    async def test_all_succeed(self, tmp_path):
        done = []

        artifacts = await _synthesizer().synthesize_slides(SLIDES, tmp_path, on_slide_done=lambda i, a: done.append(i))

        assert done == [0, 1]
        first = artifacts[0]
        assert first.image_succeeded and first.audio_succeeded
        assert first.image_path == tmp_path / "slide_1.jpg"
        assert first.audio_path.read_bytes() == SLIDES[0].script.encode()
        assert first.audio_duration_ms == len(SLIDES[0].script) * 100
        assert len(first.subtitles) == 2
        assert sum(cue.duration for cue in first.subtitles) == pytest.approx(first.audio_duration_ms / 1000)

    @pytest.mark.asyncio
    async def test_speech_failure_uses_silence(self, tmp_path):
        media = FakeMedia()

        artifacts = await _synthesizer(media=media, tts=FakeTts(fail=True)).synthesize_slides(SLIDES, tmp_path)

        for artifact in artifacts:
            assert artifact.audio_succeeded is False
            assert artifact.audio_duration_ms == 5000
            assert artifact.audio_error
            assert artifact.audio_path.read_bytes() == b"silence"
        assert [args[1] for args in media.calls_to("generate_silence")] == [5.0, 5.0]

    @pytest.mark.asyncio
    async def test_image_failure_draws_placeholder(self, tmp_path):
        artifacts = await _synthesizer(image_fail=True).synthesize_slides(SLIDES[:1], tmp_path)

        artifact = artifacts[0]
        assert artifact.image_succeeded is False
        assert "no image" in artifact.image_error
        assert artifact.audio_succeeded is True
        with Image.open(artifact.image_path) as image:
            assert image.size == (160, 90)

    @pytest.mark.asyncio
    async def test_silence_failure_still_returns_artifact(self, tmp_path):
        media = FakeMedia()
        media.fail_when("generate_silence")

        artifacts = await _synthesizer(media=media, tts=FakeTts(fail=True)).synthesize_slides(SLIDES[:1], tmp_path)

        assert artifacts[0].audio_succeeded is False
        assert artifacts[0].audio_duration_ms == 5000

    @pytest.mark.asyncio
    async def test_authored_subtitles_used_without_script(self, tmp_path):
        slide = Slide(
            title="无讲稿",
            script="",
            image_prompt="黑板",
            subtitles=[SubtitleCue("第一段", 0, 1), SubtitleCue("第二段", 1, 1)],
        )

        artifacts = await _synthesizer(tts=FakeTts(fail=True)).synthesize_slides([slide], tmp_path)

        assert [(cue.text, cue.start, cue.duration) for cue in artifacts[0].subtitles] == [
            ("第一段", 0.0, 2.5),
            ("第二段", 2.5, 2.5),
        ]

    @pytest.mark.asyncio
    async def test_pause_between_slides_only(self, tmp_path):
        with patch("classreplay.services.pipeline.slides.synthesizer.asyncio.sleep", new=AsyncMock()) as sleep:
            await _synthesizer(delay=0.5).synthesize_slides(SLIDES + SLIDES[:1], tmp_path)

        assert [call.args[0] for call in sleep.await_args_list] == [0.5, 0.5]
