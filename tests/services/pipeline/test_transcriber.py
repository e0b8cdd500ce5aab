"""
Tests for chunked speech recognition
"""

from pathlib import Path

import pytest

from classreplay.services.pipeline.transcription import FAILED_CHUNK_TEMPLATE, Transcriber, plan_chunks
from tests.fakes import FakeAsr, FakeMedia


class TestPlanChunks:
    def test_even_and_remainder(self):
        chunks = plan_chunks(Path("a.mp3"), 0.0, 185.0, 60.0)

        assert [chunk.start_offset_seconds for chunk in chunks] == [0.0, 60.0, 120.0, 180.0]
        assert [chunk.duration_seconds for chunk in chunks] == [60.0, 60.0, 60.0, 5.0]
        assert [chunk.index for chunk in chunks] == [0, 1, 2, 3]

    def test_offset_window(self):
        chunks = plan_chunks(Path("a.mp3"), 30.0, 90.0, 60.0)
        assert [(chunk.start_offset_seconds, chunk.duration_seconds) for chunk in chunks] == [(30.0, 60.0)]

    def test_empty_window(self):
        assert plan_chunks(Path("a.mp3"), 10.0, 10.0, 60.0) == []


class TestTranscriber:
    @pytest.mark.asyncio
    async def test_transcript_follows_chunk_order(self, tmp_path):
        """Random per-request latency must not reorder the transcript."""
        for _ in range(5):
            asr = FakeAsr(max_delay=0.02)
            transcriber = Transcriber(asr, FakeMedia(), chunk_seconds=10.0, concurrency=3, work_dir=tmp_path)

            transcript = await transcriber.transcribe(tmp_path / "segment.mp3", 0.0, 95.0)

            assert transcript.split("\n") == [f"chunk@{start}" for start in range(0, 100, 10)]

    @pytest.mark.asyncio
    async def test_failed_chunk_placeholder(self, tmp_path):
        transcriber = Transcriber(FakeAsr(fail_starts=[60.0]), FakeMedia(), chunk_seconds=60.0, work_dir=tmp_path)

        transcript = await transcriber.transcribe(tmp_path / "segment.mp3", 0.0, 150.0)

        assert transcript.split("\n") == ["chunk@0", FAILED_CHUNK_TEMPLATE.format(number=2), "chunk@120"]

    @pytest.mark.asyncio
    async def test_extraction_failure_is_a_failed_chunk(self, tmp_path):
        media = FakeMedia()
        media.fail_when("extract_segment", lambda source, output, start, duration: start == 0.0)
        transcriber = Transcriber(FakeAsr(), media, chunk_seconds=60.0, work_dir=tmp_path)

        transcript = await transcriber.transcribe(tmp_path / "segment.mp3", 0.0, 90.0)

        assert transcript == "[segment 1 recognition failed]\nchunk@60"

    @pytest.mark.asyncio
    async def test_batches_respect_concurrency(self, tmp_path):
        asr = FakeAsr()
        media = FakeMedia()
        transcriber = Transcriber(asr, media, chunk_seconds=10.0, concurrency=2, work_dir=tmp_path)

        await transcriber.transcribe(tmp_path / "segment.mp3", 0.0, 50.0)

        assert asr.requests == 5
        assert len(media.calls_to("extract_segment")) == 5

    @pytest.mark.asyncio
    async def test_chunk_files_removed(self, tmp_path):
        work_dir = tmp_path / "work"
        transcriber = Transcriber(FakeAsr(), FakeMedia(), chunk_seconds=30.0)

        await transcriber.transcribe(tmp_path / "segment.mp3", 0.0, 100.0, work_dir=work_dir)

        assert list(work_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_progress_reports(self, tmp_path):
        reports = []
        transcriber = Transcriber(FakeAsr(), FakeMedia(), chunk_seconds=30.0, concurrency=1, work_dir=tmp_path)

        await transcriber.transcribe(tmp_path / "segment.mp3", 0.0, 120.0, on_progress=reports.append)

        assert reports == [20, 40, 60, 80, 100]

    @pytest.mark.asyncio
    async def test_empty_window(self, tmp_path):
        asr = FakeAsr()
        transcriber = Transcriber(asr, FakeMedia(), work_dir=tmp_path)

        assert await transcriber.transcribe(tmp_path / "segment.mp3", 5.0, 5.0) == ""
        assert asr.requests == 0
