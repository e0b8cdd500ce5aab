"""
Wiring for the marker pipeline
"""

from pathlib import Path
from typing import Optional

from ....config import OUTPUT_DIR, TEMP_DIR, PipelineSettings, ServiceConfig
from ...clients import ServiceClients, create_clients
from ..analysis import KnowledgeAnalyzer
from ..audio import SpeechSynthesizer
from ..images import SlideIllustrator
from ..media.ffmpeg import MediaToolkit
from ..script_generation import ScriptGenerator
from ..slides import SlideSynthesizer
from ..transcription import Transcriber
from .processor import MarkerProcessor


def create_marker_processor(
    config: Optional[ServiceConfig] = None,
    settings: Optional[PipelineSettings] = None,
    *,
    clients: Optional[ServiceClients] = None,
    media: Optional[MediaToolkit] = None,
    output_dir: Path = OUTPUT_DIR,
    temp_dir: Path = TEMP_DIR,
) -> MarkerProcessor:
    """Build a ``MarkerProcessor`` with every stage wired to the real services."""
    settings = settings or PipelineSettings.from_env()
    clients = clients or create_clients(config)
    media = media or MediaToolkit()

    speech = SpeechSynthesizer(
        clients.tts,
        media,
        byte_limit=settings.tts_byte_limit,
        segment_chars=settings.tts_segment_chars,
    )
    return MarkerProcessor(
        media=media,
        transcriber=Transcriber(
            clients.asr,
            media,
            chunk_seconds=settings.chunk_seconds,
            concurrency=settings.asr_concurrency,
            work_dir=temp_dir,
        ),
        analyzer=KnowledgeAnalyzer(clients.chat),
        script_generator=ScriptGenerator(clients.chat),
        slide_synthesizer=SlideSynthesizer(
            SlideIllustrator(clients.image),
            speech,
            media,
            inter_slide_delay=settings.inter_slide_delay_seconds,
            silent_seconds=settings.silent_fallback_seconds,
            image_size=(settings.video_width, settings.video_height),
        ),
        output_dir=output_dir,
        temp_dir=temp_dir,
        settings=settings,
    )
