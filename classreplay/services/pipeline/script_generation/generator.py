"""
Slide-deck script generation

Asks the language model for a 5-8 slide deck and recovers it from whatever
the model returns. Never raises: when no strategy yields a usable slide, the
fixed template deck is returned instead.
"""

from typing import Sequence

from ....core import get_logger
from ....models import PPTScript
from ...clients import ChatCompletionClient, ChatMessage
from .fallback import build_template_script
from .normalization import normalize_slides
from .parsing import parse_slides
from .prompts import SCRIPT_SYSTEM_PROMPT, build_script_prompt

logger = get_logger(__name__, component="script_generator")


class ScriptGenerator:
    def __init__(self, chat_client: ChatCompletionClient):
        self.chat_client = chat_client

    async def generate_script(
        self,
        knowledge_point: str,
        summary: str,
        key_points: Sequence[str] = (),
    ) -> PPTScript:
        messages = [
            ChatMessage(role="system", content=SCRIPT_SYSTEM_PROMPT),
            ChatMessage(role="user", content=build_script_prompt(knowledge_point, summary, list(key_points))),
        ]
        try:
            response = await self.chat_client.complete(messages)
        except Exception as e:
            logger.error("Script generation call failed, using template deck", extra={"error": str(e)})
            return build_template_script(knowledge_point, summary)

        strategy, raw_slides = parse_slides(response)
        slides = normalize_slides(raw_slides or [])
        if not slides:
            logger.warning("Could not recover slides from response, using template deck", extra={
                "response_preview": response[:200],
            })
            return build_template_script(knowledge_point, summary)

        logger.info("Slide script generated", extra={"slides": len(slides), "strategy": strategy})
        return PPTScript(slides=slides)
