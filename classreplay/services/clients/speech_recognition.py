"""
Speech recognition client (Volcengine BigModel flash recognition)

The service reports its outcome in the ``X-Api-Status-Code`` response header:
``20000000`` is success and ``20000003`` means the audio held no speech.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

import httpx

from ...config import AsrConfig
from ...core import BoundaryCallError, get_logger
from .base import HttpServiceClient

logger = get_logger(__name__, component="asr_client")

STATUS_OK = "20000000"
STATUS_SILENT = "20000003"


@dataclass
class RecognitionResult:
    text: str
    silent: bool = False


class SpeechRecognitionClient(HttpServiceClient):
    service_name = "asr"

    def __init__(self, config: AsrConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(timeout=config.timeout_seconds, transport=transport)
        self.config = config

    async def recognize(self, audio_base64: str) -> RecognitionResult:
        """Recognize one base64-encoded audio chunk."""
        request_id = str(uuid.uuid4())
        headers = {
            "Content-Type": "application/json",
            "X-Api-App-Key": self.config.app_id,
            "X-Api-Access-Key": self.config.access_token,
            "X-Api-Resource-Id": self.config.resource_id,
            "X-Api-Request-Id": request_id,
            "X-Api-Sequence": "-1",
        }
        payload = {
            "user": {"uid": self.config.app_id},
            "audio": {"data": audio_base64},
            "request": {"model_name": "bigmodel"},
        }

        response = await self._post(self.config.base_url, payload, headers)
        status_code = response.headers.get("X-Api-Status-Code")
        logger.debug("Recognition response", extra={
            "request_id": request_id,
            "status_code": status_code,
            "logid": response.headers.get("X-Tt-Logid"),
        })

        if status_code == STATUS_SILENT:
            return RecognitionResult(text="", silent=True)
        if status_code != STATUS_OK:
            message = response.headers.get("X-Api-Message") or "unknown error"
            raise BoundaryCallError(self.service_name, f"{status_code}: {message}")

        data = self._json(response)
        text = (data.get("result") or {}).get("text") or ""
        return RecognitionResult(text=text)
