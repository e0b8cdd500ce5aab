"""
Knowledge-point analysis

Asks the language model what a transcript is about. The analyzer never fails:
an unusable answer falls back to a deterministic default built from the
transcript itself.
"""

from typing import Any, Dict, List

from ....core import get_logger
from ....models import KnowledgeAnalysis, Subject
from ...clients import ChatCompletionClient, ChatMessage
from ...infrastructure.parsing import parse_json_object
from .prompts import ANALYSIS_SYSTEM_PROMPT, build_analysis_prompt

logger = get_logger(__name__, component="knowledge_analyzer")

DEFAULT_KNOWLEDGE_POINT = "课堂知识点"
UNNAMED_KNOWLEDGE_POINT = "知识点"
SUMMARY_PREFIX_CHARS = 50


def summarize_prefix(transcript: str) -> str:
    return transcript[:SUMMARY_PREFIX_CHARS] + "..."


def default_analysis(transcript: str) -> KnowledgeAnalysis:
    """Analysis used when the model gives nothing usable."""
    return KnowledgeAnalysis(
        knowledge_point=DEFAULT_KNOWLEDGE_POINT,
        summary=summarize_prefix(transcript),
        subject=Subject.MATH,
        key_points=(),
    )


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _key_points(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if str(item).strip()]


def analysis_from_payload(payload: Dict[str, Any], transcript: str) -> KnowledgeAnalysis:
    """Build an analysis from parsed model JSON, defaulting each missing field."""
    return KnowledgeAnalysis(
        knowledge_point=_text(payload.get("knowledgePoint") or payload.get("knowledge_point")) or UNNAMED_KNOWLEDGE_POINT,
        summary=_text(payload.get("summary")) or summarize_prefix(transcript),
        subject=Subject.parse(payload.get("subject")),
        key_points=tuple(_key_points(payload.get("keyPoints") or payload.get("key_points"))),
    )


class KnowledgeAnalyzer:
    def __init__(self, chat_client: ChatCompletionClient):
        self.chat_client = chat_client

    async def analyze(self, transcript: str) -> KnowledgeAnalysis:
        messages = [
            ChatMessage(role="system", content=ANALYSIS_SYSTEM_PROMPT),
            ChatMessage(role="user", content=build_analysis_prompt(transcript)),
        ]
        try:
            response = await self.chat_client.complete(messages)
        except Exception as e:
            logger.error("Knowledge analysis call failed, using default", extra={"error": str(e)})
            return default_analysis(transcript)

        payload = parse_json_object(response)
        if payload is None:
            logger.warning("Could not parse analysis response, using default", extra={
                "response_preview": response[:200],
            })
            return default_analysis(transcript)

        analysis = analysis_from_payload(payload, transcript)
        logger.info("Knowledge point identified", extra={
            "knowledge_point": analysis.knowledge_point,
            "subject": analysis.subject.value,
            "key_points": len(analysis.key_points),
        })
        return analysis
