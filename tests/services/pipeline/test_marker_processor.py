"""
Tests for the marker pipeline
"""

import pytest

from classreplay.config import PipelineSettings
from classreplay.core import MarkerWindowError, MediaToolError
from classreplay.models import BatchCompleted, MarkerEvent, MarkerFailure, MarkerResult, ProgressEvent
from classreplay.services.clients import ServiceClients
from classreplay.services.pipeline.markers import FINAL_VIDEO_NAME, MarkerProcessor, create_marker_processor
from tests.fakes import FakeAsr, FakeChat, FakeImageClient, FakeMedia, FakeTts, build_processor


def _media(length: float, **kwargs) -> FakeMedia:
    return FakeMedia(durations={"lesson.mp3": length}, **kwargs)


def _audio(tmp_path):
    path = tmp_path / "lesson.mp3"
    path.write_bytes(b"recording")
    return path


def _fail_segment_of(duration: float):
    def predicate(source, output, start, length):
        return output.name == "audio_segment.mp3" and length == pytest.approx(duration)
    return predicate


class TestExtractionWindow:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("marker_time", [float("nan"), float("inf"), float("-inf")])
    async def test_non_finite_marker(self, tmp_path, marker_time):
        media = _media(7200.0)
        processor = build_processor(tmp_path, media=media)

        with pytest.raises(MarkerWindowError):
            await processor.extraction_window(_audio(tmp_path), marker_time)
        assert media.calls_to("probe_duration") == []

    @pytest.mark.asyncio
    async def test_non_finite_marker_fails_without_transcribing(self, tmp_path):
        asr = FakeAsr()
        processor = build_processor(tmp_path, media=_media(7200.0), asr=asr)

        results = await processor.process_all_markers(_audio(tmp_path), [float("nan"), 100])

        assert [result.success for result in results] == [False, True]
        assert asr.requests == 5

    @pytest.mark.asyncio
    async def test_clamped_to_recording(self, tmp_path):
        processor = build_processor(tmp_path, media=_media(185.0))
        assert await processor.extraction_window(_audio(tmp_path), 300) == (0.0, 185.0)

    @pytest.mark.asyncio
    async def test_inside_recording(self, tmp_path):
        processor = build_processor(tmp_path, media=_media(3600.0))
        assert await processor.extraction_window(_audio(tmp_path), 1000) == (700.0, 1180.0)

    @pytest.mark.asyncio
    async def test_marker_past_end(self, tmp_path):
        processor = build_processor(tmp_path, media=_media(100.0))
        with pytest.raises(MarkerWindowError):
            await processor.extraction_window(_audio(tmp_path), 9999)


class TestProcessMarker:
    @pytest.mark.asyncio
    async def test_short_recording(self, tmp_path):
        media = _media(185.0)
        processor = build_processor(tmp_path, media=media)

        result = await processor.process_marker(_audio(tmp_path), 300)

        source, output, start, length = media.calls_to("extract_segment")[0]
        assert output.name == "audio_segment.mp3"
        assert (start, length) == (0.0, 185.0)
        assert result.transcript == "chunk@0\nchunk@60\nchunk@120\nchunk@180"
        assert result.knowledge_point == "勾股定理"
        assert result.key_points == ("a²+b²=c²",)

    @pytest.mark.asyncio
    async def test_artifacts_and_urls(self, tmp_path):
        processor = build_processor(tmp_path, media=_media(600.0))

        result = await processor.process_marker(_audio(tmp_path), 200)

        marker_dir = tmp_path / "output" / result.marker_id
        assert result.output_dir == str(marker_dir)
        assert [slide.index for slide in result.slides] == [1, 2]
        first = result.slides[0]
        assert first.image_url == f"/api/files/{result.marker_id}/slide_1.jpg"
        assert first.audio_url == f"/api/files/{result.marker_id}/slide_1_audio.mp3"
        assert (marker_dir / "slide_1.jpg").exists()
        assert result.video.path == str(marker_dir / FINAL_VIDEO_NAME)
        assert result.video.url == f"/api/files/{result.marker_id}/{FINAL_VIDEO_NAME}"
        assert result.video.subtitles_burned is True
        assert (marker_dir / "final_video.srt").exists()
        assert list((tmp_path / "temp").iterdir()) == []

    @pytest.mark.asyncio
    async def test_progress_is_monotonic(self, tmp_path):
        events = []
        processor = build_processor(tmp_path, media=_media(600.0))

        await processor.process_marker(_audio(tmp_path), 200, on_progress=events.append)

        percents = [event.percent for event in events]
        assert percents == sorted(percents)
        assert percents[0] == 0
        assert percents[-1] == 100

    @pytest.mark.asyncio
    async def test_stage_updates(self, tmp_path):
        updates = []
        processor = build_processor(tmp_path, media=_media(600.0))

        await processor.process_marker(_audio(tmp_path), 200, on_update=updates.append)

        stages = [update.stage for update in updates if update.status == "processing"]
        assert stages == ["extracting", "transcribing", "analyzing", "scripting", "synthesizing_slides", "assembling_video"]
        assert updates[-1].stage == "done"
        assert updates[1].data == {"start": 0.0, "end": 380.0}

    @pytest.mark.asyncio
    async def test_failure_reports_stage_and_cleans_up(self, tmp_path):
        media = _media(600.0)
        media.fail_when("extract_segment", _fail_segment_of(380.0))
        updates = []
        processor = build_processor(tmp_path, media=media)

        with pytest.raises(MediaToolError):
            await processor.process_marker(_audio(tmp_path), 200, on_update=updates.append)

        assert updates[-1].stage == "failed"
        assert updates[-1].data["failed_stage"] == "extracting"
        assert "forced extract_segment failure" in updates[-1].data["error"]
        assert list((tmp_path / "temp").iterdir()) == []

    @pytest.mark.asyncio
    async def test_slide_cues_match_rendered_audio(self, tmp_path):
        # The TTS service reports a few seconds; the file ffmpeg renders lasts 20 s.
        media = FakeMedia(durations={"lesson.mp3": 600.0, "slide_1_audio.mp3": 20.0, "slide_2_audio.mp3": 9.0})
        processor = build_processor(tmp_path, media=media)

        result = await processor.process_marker(_audio(tmp_path), 200)

        first, second = result.slides
        assert first.audio_duration_ms < 20000
        assert sum(cue.duration for cue in first.subtitles) == pytest.approx(20.0)
        assert sum(cue.duration for cue in second.subtitles) == pytest.approx(9.0)
        burned = media.burned_subtitles[0]
        assert "Dialogue: 0,0:00:20.00," in burned

    @pytest.mark.asyncio
    async def test_slide_cues_from_synthesis_without_ffmpeg(self, tmp_path):
        media = FakeMedia(durations={"lesson.mp3": 600.0, "slide_1_audio.mp3": 20.0}, available=False)
        processor = build_processor(tmp_path, media=media)

        result = await processor.process_marker(_audio(tmp_path), 200)

        first = result.slides[0]
        assert sum(cue.duration for cue in first.subtitles) == pytest.approx(first.audio_duration_ms / 1000)

    @pytest.mark.asyncio
    async def test_without_ffmpeg_no_video(self, tmp_path):
        processor = build_processor(tmp_path, media=_media(600.0, available=False))

        result = await processor.process_marker(_audio(tmp_path), 200)

        assert result.video is None
        assert len(result.slides) == 2

    @pytest.mark.asyncio
    async def test_degraded_services_still_produce_video(self, tmp_path):
        processor = build_processor(
            tmp_path,
            media=_media(600.0),
            chat=FakeChat(analysis="不是JSON", script="抱歉"),
            image=FakeImageClient(fail=True),
            tts=FakeTts(fail=True),
        )

        result = await processor.process_marker(_audio(tmp_path), 200)

        assert len(result.slides) == 5
        assert not any(slide.image_succeeded or slide.audio_succeeded for slide in result.slides)
        assert result.video is not None


class TestProcessAllMarkers:
    @pytest.mark.asyncio
    async def test_failing_marker_does_not_stop_batch(self, tmp_path):
        media = _media(600.0)
        media.fail_when("extract_segment", _fail_segment_of(380.0))
        updates = []
        processor = build_processor(tmp_path, media=media)

        results = await processor.process_all_markers(
            _audio(tmp_path), [100, 200, 300],
            on_marker_update=lambda index, update: updates.append((index, update)),
        )

        assert [result.success for result in results] == [True, False, True]
        assert isinstance(results[1], MarkerFailure)
        assert results[1].marker_time == 200
        assert "extract_segment" in results[1].error
        assert [(index, update.stage) for index, update in updates if update.stage in ("started", "completed", "failed")][:3] == [
            (0, "started"),
            (0, "completed"),
            (1, "started"),
        ]
        assert (1, "failed") in [(index, update.stage) for index, update in updates]

    @pytest.mark.asyncio
    async def test_video_failure_isolated(self, tmp_path):
        media = _media(600.0)
        concat_calls = []

        def first_concat_fails(inputs, output):
            concat_calls.append(output)
            return len(concat_calls) == 1

        media.fail_when("concat_videos", first_concat_fails)
        processor = build_processor(tmp_path, media=media)

        results = await processor.process_all_markers(_audio(tmp_path), [100, 200])

        assert [result.success for result in results] == [False, True]
        assert results[1].video is not None

    @pytest.mark.asyncio
    async def test_batch_progress(self, tmp_path):
        events = []
        processor = build_processor(tmp_path, media=_media(600.0))

        await processor.process_all_markers(_audio(tmp_path), [100, 200], on_progress=events.append)

        percents = [event.percent for event in events]
        assert percents == sorted(percents)
        assert percents[-1] == 100
        assert 50 in percents

    @pytest.mark.asyncio
    async def test_raising_callbacks_do_not_break_batch(self, tmp_path):
        processor = build_processor(tmp_path, media=_media(600.0))

        def explode(*args):
            raise RuntimeError("observer bug")

        results = await processor.process_all_markers(
            _audio(tmp_path), [100], on_progress=explode, on_marker_update=explode,
        )

        assert results[0].success is True

    @pytest.mark.asyncio
    async def test_no_markers(self, tmp_path):
        processor = build_processor(tmp_path, media=_media(600.0))
        assert await processor.process_all_markers(_audio(tmp_path), []) == []


class TestStreamAllMarkers:
    @pytest.mark.asyncio
    async def test_ends_with_batch_completed(self, tmp_path):
        processor = build_processor(tmp_path, media=_media(600.0))

        events = [event async for event in processor.stream_all_markers(_audio(tmp_path), [100, 9999])]

        assert isinstance(events[-1], BatchCompleted)
        assert [result.success for result in events[-1].results] == [True, False]
        assert any(isinstance(event, ProgressEvent) for event in events[:-1])
        marker_events = [event for event in events if isinstance(event, MarkerEvent)]
        assert marker_events[0].index == 0
        assert marker_events[-1].index == 1
        assert marker_events[-1].update.stage == "failed"


class TestFactory:
    def test_wires_given_clients(self, tmp_path):
        media = FakeMedia()
        settings = PipelineSettings(chunk_seconds=30.0, asr_concurrency=2)
        clients = ServiceClients(chat=FakeChat(), image=FakeImageClient(), asr=FakeAsr(), tts=FakeTts())

        processor = create_marker_processor(
            settings=settings,
            clients=clients,
            media=media,
            output_dir=tmp_path / "output",
            temp_dir=tmp_path / "temp",
        )

        assert isinstance(processor, MarkerProcessor)
        assert processor.media is media
        assert processor.settings is settings
        assert processor.transcriber.chunk_seconds == 30.0
        assert processor.transcriber.concurrency == 2
        assert processor.transcriber.asr_client is clients.asr
        assert processor.analyzer.chat_client is clients.chat
        assert processor.output_dir == tmp_path / "output"

    @pytest.mark.asyncio
    async def test_factory_processor_runs(self, tmp_path):
        clients = ServiceClients(chat=FakeChat(), image=FakeImageClient(), asr=FakeAsr(), tts=FakeTts())
        processor = create_marker_processor(
            settings=PipelineSettings(inter_slide_delay_seconds=0.0),
            clients=clients,
            media=_media(120.0),
            output_dir=tmp_path / "output",
            temp_dir=tmp_path / "temp",
        )

        result = await processor.process_marker(_audio(tmp_path), 60)

        assert isinstance(result, MarkerResult)
        assert result.transcript == "chunk@0\nchunk@60"
