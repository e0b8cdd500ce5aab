"""
Marker pipeline: one audio file and N markers in, N slide videos out
"""

from .factory import create_marker_processor
from .processor import FINAL_VIDEO_NAME, MarkerProcessor
from .progress import STAGE_BANDS, BatchProgress, MarkerProgress

__all__ = [
    "create_marker_processor",
    "MarkerProcessor",
    "FINAL_VIDEO_NAME",
    "STAGE_BANDS",
    "BatchProgress",
    "MarkerProgress",
]
