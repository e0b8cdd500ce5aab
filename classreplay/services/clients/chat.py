"""
Language model client (OpenAI-compatible chat completions)
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from ...config import ChatApiConfig
from ...core import BoundaryCallError, get_logger
from .base import HttpServiceClient

logger = get_logger(__name__, component="chat_client")


@dataclass
class ChatMessage:
    role: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


class ChatCompletionClient(HttpServiceClient):
    """Sends a message list and returns the first choice's text."""

    service_name = "llm"

    def __init__(self, config: ChatApiConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(timeout=config.timeout_seconds, transport=transport)
        self.config = config

    @property
    def url(self) -> str:
        return f"{self.config.base_url}/v1/chat/completions"

    def _headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json", "api-key": self.config.api_key}

    async def complete(self, messages: List[ChatMessage], model: Optional[str] = None) -> str:
        payload: Dict[str, Any] = {
            "model": model or self.config.chat_model,
            "messages": [message.to_dict() for message in messages],
            "stream": False,
            "extra_body": {"reasoning": False},
        }
        logger.debug("Chat completion request", extra={
            "model": payload["model"],
            "prompt_preview": messages[-1].content[:100] if messages else "",
        })

        data = self._json(await self._post(self.url, payload, self._headers()))

        choices = data.get("choices") or []
        content = ""
        if choices and isinstance(choices[0], dict):
            content = (choices[0].get("message") or {}).get("content") or ""
        if not isinstance(content, str):
            raise BoundaryCallError(self.service_name, "message content is not text")

        logger.info("Chat completion received", extra={
            "model": payload["model"],
            "response_chars": len(content),
            "usage": data.get("usage"),
        })
        return content
