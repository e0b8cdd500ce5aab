"""
Prompts for knowledge-point analysis of a lesson transcript.
"""

from ....models import Subject

SUBJECT_CHOICES = "/".join(subject.value for subject in Subject)

ANALYSIS_SYSTEM_PROMPT = """你是一个专业的教育内容分析师，擅长从课堂录音转写内容中提取核心知识点。
请仔细分析课堂内容，识别出主要讲解的知识点和学科。"""

ANALYSIS_USER_PROMPT = """请分析以下课堂转写内容，提取核心知识点：

\"\"\"
{transcript}
\"\"\"

请返回 JSON 格式的分析结果：
{{
  "knowledgePoint": "核心知识点名称（简洁，10字以内）",
  "summary": "知识点概要（50字以内，概括主要内容）",
  "subject": "学科（{subjects} 之一）",
  "keyPoints": ["要点1", "要点2", "要点3"]
}}

只返回 JSON，不要有其他内容。"""


def build_analysis_prompt(transcript: str) -> str:
    return ANALYSIS_USER_PROMPT.format(transcript=transcript, subjects=SUBJECT_CHOICES)
