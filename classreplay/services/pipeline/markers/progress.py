"""
Progress reporting for marker processing

A marker's stages each own a fixed band of the 0-100 range. Work inside a
stage reports a fraction of its band. Batch progress folds the progress of
the current marker into the position of that marker in the batch. Both
reporters never let the percentage go backwards.
"""

from typing import Callable, Dict, Optional, Tuple

from ....models import MarkerStage, ProgressEvent

ProgressSink = Callable[[ProgressEvent], None]

STAGE_BANDS: Dict[MarkerStage, Tuple[int, int]] = {
    MarkerStage.EXTRACTING: (0, 5),
    MarkerStage.TRANSCRIBING: (5, 20),
    MarkerStage.ANALYZING: (20, 30),
    MarkerStage.SCRIPTING: (30, 40),
    MarkerStage.SYNTHESIZING_SLIDES: (40, 80),
    MarkerStage.ASSEMBLING_VIDEO: (80, 100),
}


class MarkerProgress:
    """Maps stage-relative progress onto the marker's 0-100 range."""

    def __init__(self, sink: Optional[ProgressSink] = None):
        self.sink = sink
        self.percent = 0

    def enter(self, stage: MarkerStage, message: str) -> None:
        self.within(stage, 0.0, message)

    def within(self, stage: MarkerStage, fraction: float, message: str) -> None:
        start, end = STAGE_BANDS[stage]
        fraction = min(1.0, max(0.0, fraction))
        self._emit(start + (end - start) * fraction, message, stage)

    def finish(self, message: str) -> None:
        self._emit(100, message, MarkerStage.DONE)

    def _emit(self, percent: float, message: str, stage: MarkerStage) -> None:
        self.percent = max(self.percent, min(100, round(percent)))
        if self.sink:
            self.sink(ProgressEvent(percent=self.percent, message=message, stage=stage))


class BatchProgress:
    """
    Overall progress of a batch of markers.

    Marker ``index`` of ``total`` at ``marker_percent`` maps to
    ``round(index / total * 100) + round(marker_percent / total)``.
    """

    def __init__(self, total: int, sink: Optional[ProgressSink] = None):
        self.total = max(1, total)
        self.sink = sink
        self.percent = 0

    def marker_progress(self, index: int, event: ProgressEvent) -> None:
        base = round(index / self.total * 100)
        self._emit(base + round(event.percent / self.total), event.message, event.stage)

    def marker_started(self, index: int, message: str) -> None:
        self._emit(round(index / self.total * 100), message, MarkerStage.PENDING)

    def finish(self, message: str) -> None:
        self._emit(100, message, MarkerStage.DONE)

    def _emit(self, percent: int, message: str, stage: Optional[MarkerStage]) -> None:
        self.percent = max(self.percent, min(100, percent))
        if self.sink:
            self.sink(ProgressEvent(percent=self.percent, message=message, stage=stage))
