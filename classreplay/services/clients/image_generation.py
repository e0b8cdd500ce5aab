"""
Image generation client

The image model is served through the same chat-completions gateway with
``modalities: ["text", "image"]``. Images come back either in
``message.images`` or inside a list-valued ``message.content``, as data URIs
or as bare base64.
"""

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from ...config import ChatApiConfig
from ...core import BoundaryCallError, get_logger
from .base import HttpServiceClient

logger = get_logger(__name__, component="image_client")

_DATA_URI = re.compile(r"^data:image/(\w+);base64,(.+)$", re.DOTALL)
_BARE_BASE64 = re.compile(r"^[A-Za-z0-9+/=]+$")


@dataclass
class GeneratedImage:
    data: bytes
    format: str


def extract_base64_image(url: Any) -> Optional[GeneratedImage]:
    """Decode a data URI or a long bare base64 string (assumed PNG)."""
    if not isinstance(url, str) or not url:
        return None

    match = _DATA_URI.match(url)
    if match:
        image_format, payload = match.group(1).lower(), match.group(2)
    elif len(url) > 100 and _BARE_BASE64.match(url):
        image_format, payload = "png", url
    else:
        return None

    try:
        return GeneratedImage(data=base64.b64decode(payload), format=image_format)
    except (binascii.Error, ValueError):
        return None


def extract_image_from_response(data: Dict[str, Any]) -> Optional[GeneratedImage]:
    """Return the first decodable image in any choice of a completion response."""
    for choice in data.get("choices") or []:
        message = choice.get("message") if isinstance(choice, dict) else None
        if not isinstance(message, dict):
            continue

        candidates = []
        if isinstance(message.get("images"), list):
            candidates.extend(message["images"])
        if isinstance(message.get("content"), list):
            candidates.extend(message["content"])

        for item in candidates:
            if not isinstance(item, dict) or item.get("type") != "image_url":
                continue
            image = extract_base64_image((item.get("image_url") or {}).get("url"))
            if image:
                return image
    return None


class ImageGenerationClient(HttpServiceClient):
    service_name = "image"

    def __init__(self, config: ChatApiConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(timeout=config.timeout_seconds, transport=transport)
        self.config = config

    async def generate(self, prompt: str) -> GeneratedImage:
        payload = {
            "model": self.config.image_model,
            "messages": [{"role": "user", "content": prompt}],
            "modalities": ["text", "image"],
        }
        headers = {"Content-Type": "application/json", "api-key": self.config.api_key}

        data = self._json(await self._post(f"{self.config.base_url}/v1/chat/completions", payload, headers))
        image = extract_image_from_response(data)
        if image is None:
            logger.error("No image in response", extra={"response_preview": str(data)[:500]})
            raise BoundaryCallError(self.service_name, "no image in response")

        logger.info("Image generated", extra={"format": image.format, "bytes": len(image.data)})
        return image
