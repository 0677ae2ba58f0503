from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from orbit_trace.simulation.engine import BaseObserver, OutputRow, Segment
from orbit_trace.simulation.request import PropagationRequest

logger = logging.getLogger(__name__)


def progress_percent(elapsed_s: float, request: PropagationRequest) -> float:
    """Share of the window covered, clamped to [0, 100]."""
    if request.span_s <= 0:
        return 100.0
    return 100.0 * min(max(elapsed_s, 0.0), request.span_s) / request.span_s


@dataclass
class ProgressReporter(BaseObserver):
    """
    Logs per-segment progress: object, label, segment number, percent of the
    window covered and rows produced so far.
    """
    label: str = ""
    every_n_rows: int = 512
    name: str = "progress"
    _request: Optional[PropagationRequest] = field(default=None, init=False, repr=False)
    _rows: int = field(default=0, init=False, repr=False)

    def _log(self, sat_id: int, segment: Segment, percent: float) -> None:
        logger.info("%5d (%s) %-3d [%3.0f%%] %d pp.", sat_id, self.label, segment.index + 1, percent, self._rows)

    def on_segment_start(self, sat_id: int, segment: Segment, request: PropagationRequest) -> None:
        self._request = request
        elapsed = segment.effective_epoch + segment.seg_start - request.start
        self._log(sat_id, segment, progress_percent(elapsed, request))

    def on_row(self, sat_id: int, row: OutputRow, row_count: int) -> None:
        self._rows = row_count
        if self._request is not None and row_count % self.every_n_rows == 0:
            percent = progress_percent(row.timestamp - self._request.start, self._request)
            logger.info("%5d (%s) [%3.0f%%] %d pp.", sat_id, self.label, percent, row_count)

    def on_segment_end(self, sat_id: int, segment: Segment, reached_offset: int,
                       row_count: int, request: PropagationRequest) -> None:
        self._rows = row_count
        elapsed = segment.effective_epoch + reached_offset - request.start
        self._log(sat_id, segment, progress_percent(elapsed, request))
