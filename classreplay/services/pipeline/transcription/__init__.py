from .transcriber import FAILED_CHUNK_TEMPLATE, ChunkResult, Transcriber, plan_chunks

__all__ = ["Transcriber", "ChunkResult", "plan_chunks", "FAILED_CHUNK_TEMPLATE"]
