"""
Tests for knowledge-point analysis
"""

import pytest

from classreplay.core import BoundaryCallError
from classreplay.models import Subject
from classreplay.services.pipeline.analysis import KnowledgeAnalyzer, analysis_from_payload, default_analysis
from classreplay.services.pipeline.analysis.prompts import ANALYSIS_SYSTEM_PROMPT
from tests.fakes import FakeChat

TRANSCRIPT = "今天我们学习了勾股定理。直角三角形两条直角边的平方和等于斜边的平方。"


class TestDefaultAnalysis:
    def test_built_from_transcript(self):
        analysis = default_analysis("字" * 80)

        assert analysis.knowledge_point == "课堂知识点"
        assert analysis.summary == "字" * 50 + "..."
        assert analysis.subject == Subject.MATH
        assert analysis.key_points == ()


class TestSubjectParse:
    def test_case_insensitive(self):
        assert Subject.parse(" Physics ") == Subject.PHYSICS

    def test_unknown_uses_default(self):
        assert Subject.parse("astronomy") == Subject.MATH
        assert Subject.parse(None) == Subject.MATH
        assert Subject.parse("astronomy", default=Subject.HISTORY) == Subject.HISTORY


class TestAnalysisFromPayload:
    def test_camel_case(self):
        analysis = analysis_from_payload(
            {"knowledgePoint": " 勾股定理 ", "summary": "三边关系", "subject": "MATH", "keyPoints": ["a", " ", "b"]},
            TRANSCRIPT,
        )
        assert analysis.knowledge_point == "勾股定理"
        assert analysis.subject == Subject.MATH
        assert analysis.key_points == ("a", "b")

    def test_snake_case_and_defaults(self):
        analysis = analysis_from_payload({"knowledge_point": "光合作用", "subject": "biology"}, TRANSCRIPT)
        assert analysis.knowledge_point == "光合作用"
        assert analysis.subject == Subject.BIOLOGY
        assert analysis.summary == TRANSCRIPT[:50] + "..."

    def test_missing_fields(self):
        analysis = analysis_from_payload({"subject": "astrology"}, TRANSCRIPT)
        assert analysis.knowledge_point == "知识点"
        assert analysis.subject == Subject.MATH


class TestKnowledgeAnalyzer:
    @pytest.mark.asyncio
    async def test_parses_model_answer(self):
        chat = FakeChat()
        analysis = await KnowledgeAnalyzer(chat).analyze(TRANSCRIPT)

        assert analysis.knowledge_point == "勾股定理"
        assert analysis.subject == Subject.MATH
        messages = chat.requests[0]
        assert messages[0].content == ANALYSIS_SYSTEM_PROMPT
        assert TRANSCRIPT in messages[1].content

    @pytest.mark.asyncio
    async def test_fenced_answer_with_prose(self):
        chat = FakeChat(analysis='分析结果：\n```json\n{"knowledgePoint": "一元二次方程", "subject": "math",}\n```')
        analysis = await KnowledgeAnalyzer(chat).analyze(TRANSCRIPT)
        assert analysis.knowledge_point == "一元二次方程"

    @pytest.mark.asyncio
    async def test_unparseable_answer_uses_default(self):
        analysis = await KnowledgeAnalyzer(FakeChat(analysis="这节课讲的是勾股定理")).analyze(TRANSCRIPT)
        assert analysis == default_analysis(TRANSCRIPT)

    @pytest.mark.asyncio
    async def test_service_failure_uses_default(self):
        chat = FakeChat(analysis=BoundaryCallError("llm", "timeout"))
        analysis = await KnowledgeAnalyzer(chat).analyze(TRANSCRIPT)
        assert analysis.knowledge_point == "课堂知识点"
