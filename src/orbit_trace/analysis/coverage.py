from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from orbit_trace.core.errors import CoverageGapError, PropagationError
from orbit_trace.core.propagator import Propagator, Sgp4Propagator
from orbit_trace.objects.historic_set import HistoricSet
from orbit_trace.simulation.request import PropagationRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidityInterval:
    """
    [start, end) in UNIX seconds over which record `record_index` is the
    authoritative one. end is None for the last record (open-ended).
    """
    record_index: int
    start: int
    end: Optional[int]

    def overlaps(self, t0: int, t1: int) -> bool:
        return self.start <= t1 and (self.end is None or self.end > t0)


def validity_intervals(store: HistoricSet, propagator: Optional[Propagator] = None) -> List[ValidityInterval]:
    """
    Each record is authoritative from its effective epoch up to the next
    usable record's effective epoch. Records after the first whose epoch
    cannot be propagated are left out, as the engine skips them.
    """
    propagator = propagator or Sgp4Propagator()
    epochs: List[Tuple[int, int]] = []
    for i, rec in enumerate(store):
        try:
            epochs.append((i, propagator.propagate(rec, 0.0).time_unix))
        except PropagationError as e:
            if i == 0:
                raise
            logger.warning("Object %d, record %d: element epoch could not be propagated (%s); record skipped",
                           store.sat_id, i, e)

    out: List[ValidityInterval] = []
    for n, (i, start) in enumerate(epochs):
        end = epochs[n + 1][1] if n + 1 < len(epochs) else None
        out.append(ValidityInterval(record_index=i, start=start, end=end))
    return out


def check_coverage(store: HistoricSet, request: PropagationRequest,
                   propagator: Optional[Propagator] = None) -> List[ValidityInterval]:
    """
    Validity intervals a propagation of `request` would use, without
    sampling anything. Raises the CoverageGapError the engine would raise.
    """
    intervals = validity_intervals(store, propagator)
    if not intervals:
        return []

    first = intervals[0]
    if request.start < first.start:
        raise CoverageGapError(
            store.sat_id, 0, "start time is before the earliest element epoch",
            earliest_epoch=first.start, request_start=request.start,
        )

    used = []
    for iv in intervals:
        # Boundary instants belong to the later record
        if iv.end is not None and iv.end <= request.start:
            continue
        if used and iv.start >= request.end:
            break
        used.append(iv)
    return used


def largest_epoch_gap_s(intervals: List[ValidityInterval]) -> int:
    """Longest closed interval one record has to cover (0 if none)."""
    spans = [iv.end - iv.start for iv in intervals if iv.end is not None]
    return max(spans, default=0)
