"""
Speech synthesis client (Volcengine TTS, non-streaming ``query`` operation)

A response with ``code == 3000`` carries base64 audio in ``data`` and the
audio length in milliseconds in ``addition.duration``.
"""

import base64
import binascii
import uuid
from dataclasses import dataclass
from typing import Optional

import httpx

from ...config import TtsConfig
from ...core import BoundaryCallError, get_logger
from .base import HttpServiceClient

logger = get_logger(__name__, component="tts_client")

SUCCESS_CODE = 3000


@dataclass
class SynthesizedAudio:
    data: bytes
    duration_ms: Optional[int] = None


class SpeechSynthesisClient(HttpServiceClient):
    service_name = "tts"

    def __init__(self, config: TtsConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(timeout=config.timeout_seconds, transport=transport)
        self.config = config

    async def synthesize(self, text: str) -> SynthesizedAudio:
        """Synthesize text that already fits the service's request size limit."""
        reqid = str(uuid.uuid4())
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer;{self.config.token}",
        }
        payload = {
            "app": {"appid": self.config.app_id, "token": self.config.token, "cluster": self.config.cluster},
            "user": {"uid": "classreplay"},
            "audio": {
                "voice_type": self.config.voice_type,
                "encoding": self.config.encoding,
                "speed_ratio": self.config.speed_ratio,
                "rate": self.config.sample_rate,
            },
            "request": {"reqid": reqid, "text": text, "operation": "query"},
        }

        data = self._json(await self._post(self.config.base_url, payload, headers))
        if data.get("code") != SUCCESS_CODE:
            raise BoundaryCallError(self.service_name, f"code={data.get('code')}, message={data.get('message') or 'unknown'}")
        if not data.get("data"):
            raise BoundaryCallError(self.service_name, "empty audio payload")

        try:
            audio = base64.b64decode(data["data"])
        except (binascii.Error, ValueError) as e:
            raise BoundaryCallError(self.service_name, "audio payload is not base64") from e

        duration = (data.get("addition") or {}).get("duration")
        try:
            duration_ms = int(float(duration)) if duration is not None else None
        except (TypeError, ValueError):
            duration_ms = None

        logger.info("Speech synthesized", extra={"reqid": reqid, "bytes": len(audio), "duration_ms": duration_ms})
        return SynthesizedAudio(data=audio, duration_ms=duration_ms)
