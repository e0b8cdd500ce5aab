"""
External AI service clients

Factory:
    create_clients(config) -> ServiceClients
"""

from dataclasses import dataclass
from typing import Optional

from ...config import ServiceConfig, load_service_config
from .base import HttpServiceClient
from .chat import ChatCompletionClient, ChatMessage
from .image_generation import (
    GeneratedImage,
    ImageGenerationClient,
    extract_base64_image,
    extract_image_from_response,
)
from .speech_recognition import RecognitionResult, SpeechRecognitionClient
from .speech_synthesis import SpeechSynthesisClient, SynthesizedAudio


@dataclass
class ServiceClients:
    chat: ChatCompletionClient
    image: ImageGenerationClient
    asr: SpeechRecognitionClient
    tts: SpeechSynthesisClient


def create_clients(config: Optional[ServiceConfig] = None) -> ServiceClients:
    """Build all four clients from ``config`` (or the environment)."""
    config = config or load_service_config()
    return ServiceClients(
        chat=ChatCompletionClient(config.chat),
        image=ImageGenerationClient(config.chat),
        asr=SpeechRecognitionClient(config.asr),
        tts=SpeechSynthesisClient(config.tts),
    )


__all__ = [
    "HttpServiceClient",
    "ChatCompletionClient",
    "ChatMessage",
    "GeneratedImage",
    "ImageGenerationClient",
    "extract_base64_image",
    "extract_image_from_response",
    "RecognitionResult",
    "SpeechRecognitionClient",
    "SpeechSynthesisClient",
    "SynthesizedAudio",
    "ServiceClients",
    "create_clients",
]
