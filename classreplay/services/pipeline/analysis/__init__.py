from .analyzer import KnowledgeAnalyzer, analysis_from_payload, default_analysis

__all__ = ["KnowledgeAnalyzer", "analysis_from_payload", "default_analysis"]
