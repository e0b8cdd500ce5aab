"""
External service configuration

Credentials and endpoints for the four AI services, read from the environment:

=== LANGUAGE MODEL / IMAGE GENERATION ===
OpenAI-compatible gateway:
    TAL_API_BASE_URL, TAL_MLOPS_APP_ID, TAL_MLOPS_APP_KEY
    CHAT_MODEL (default doubao-seed-1.6-flash), IMAGE_MODEL (default gemini-3-pro-image)

=== SPEECH RECOGNITION ===
Volcengine BigModel flash recognition:
    VOLCENGINE_ASR_BASE_URL, VOLCENGINE_APP_ID, VOLCENGINE_ACCESS_TOKEN, VOLCENGINE_ASR_RESOURCE_ID

=== SPEECH SYNTHESIS ===
Volcengine TTS (falls back to the recognition credentials):
    TTS_API_URL, TTS_APP_ID, TTS_TOKEN, TTS_CLUSTER, TTS_VOICE_TYPE
"""

import os
from dataclasses import dataclass, field


def _env(*names: str, default: str = "") -> str:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


@dataclass(frozen=True)
class ChatApiConfig:
    """Language model and image generation gateway"""
    base_url: str = "http://ai-service.tal.com/openai-compatible"
    app_id: str = ""
    app_key: str = ""
    chat_model: str = "doubao-seed-1.6-flash"
    image_model: str = "gemini-3-pro-image"
    timeout_seconds: float = 120.0

    @property
    def api_key(self) -> str:
        return f"{self.app_id}:{self.app_key}"

    @property
    def is_configured(self) -> bool:
        return bool(self.app_id and self.app_key)


@dataclass(frozen=True)
class AsrConfig:
    """Speech recognition service"""
    base_url: str = "https://openspeech.bytedance.com/api/v3/auc/bigmodel/recognize/flash"
    app_id: str = ""
    access_token: str = ""
    resource_id: str = "volc.bigasr.auc_turbo"
    timeout_seconds: float = 120.0

    @property
    def is_configured(self) -> bool:
        return bool(self.app_id and self.access_token)


@dataclass(frozen=True)
class TtsConfig:
    """Speech synthesis service"""
    base_url: str = "https://openspeech.bytedance.com/api/v1/tts"
    app_id: str = ""
    token: str = ""
    cluster: str = "volcano_tts"
    voice_type: str = "BV406_streaming"
    encoding: str = "mp3"
    speed_ratio: float = 1.0
    sample_rate: int = 24000
    timeout_seconds: float = 60.0

    @property
    def is_configured(self) -> bool:
        return bool(self.app_id and self.token)


@dataclass(frozen=True)
class ServiceConfig:
    chat: ChatApiConfig = field(default_factory=ChatApiConfig)
    asr: AsrConfig = field(default_factory=AsrConfig)
    tts: TtsConfig = field(default_factory=TtsConfig)

    def status(self) -> dict:
        return {
            "llm": self.chat.is_configured,
            "image": self.chat.is_configured,
            "asr": self.asr.is_configured,
            "tts": self.tts.is_configured,
        }


def load_service_config() -> ServiceConfig:
    """Build the service configuration from the current environment."""
    chat_defaults = ChatApiConfig()
    asr_defaults = AsrConfig()
    tts_defaults = TtsConfig()

    asr_app_id = _env("VOLCENGINE_APP_ID")
    asr_token = _env("VOLCENGINE_ACCESS_TOKEN")

    return ServiceConfig(
        chat=ChatApiConfig(
            base_url=_env("TAL_API_BASE_URL", default=chat_defaults.base_url).rstrip("/"),
            app_id=_env("TAL_MLOPS_APP_ID", "VITE_TAL_MLOPS_APP_ID"),
            app_key=_env("TAL_MLOPS_APP_KEY", "VITE_TAL_MLOPS_APP_KEY"),
            chat_model=_env("CHAT_MODEL", default=chat_defaults.chat_model),
            image_model=_env("IMAGE_MODEL", default=chat_defaults.image_model),
        ),
        asr=AsrConfig(
            base_url=_env("VOLCENGINE_ASR_BASE_URL", default=asr_defaults.base_url),
            app_id=asr_app_id,
            access_token=asr_token,
            resource_id=_env("VOLCENGINE_ASR_RESOURCE_ID", default=asr_defaults.resource_id),
        ),
        tts=TtsConfig(
            base_url=_env("TTS_API_URL", default=tts_defaults.base_url),
            app_id=_env("TTS_APP_ID", default=asr_app_id),
            token=_env("TTS_TOKEN", default=asr_token),
            cluster=_env("TTS_CLUSTER", default=tts_defaults.cluster),
            voice_type=_env("TTS_VOICE_TYPE", default=tts_defaults.voice_type),
        ),
    )
