from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterator, List, Optional, Protocol, Sequence, Tuple

from orbit_trace.core.constants import SECONDS_PER_MINUTE
from orbit_trace.core.errors import CoverageGapError, PropagationError
from orbit_trace.core.frames import Vector3, ground_project, normalize_longitude_deg
from orbit_trace.core.propagator import PropagatedState, Propagator, Sgp4Propagator
from orbit_trace.objects.element_record import ElementRecord
from orbit_trace.objects.historic_set import HistoricSet
from orbit_trace.simulation.request import PropagationRequest

logger = logging.getLogger(__name__)

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

Projector = Callable[[PropagatedState], Tuple[float, float]]


@dataclass(frozen=True)
class OutputRow:
    """One propagated sample (TEME km, km/s; lon in [-180, 180))."""
    timestamp: int
    latitude_deg: float
    longitude_deg: float
    position_km: Vector3
    velocity_km_s: Vector3

    @property
    def formatted_timestamp(self) -> str:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc).strftime(TIME_FORMAT)

    def as_csv_fields(self) -> List[str]:
        x, y, z = self.position_km
        vx, vy, vz = self.velocity_km_s
        return [self.formatted_timestamp, str(self.timestamp)] + [
            f"{value:.6f}" for value in (self.latitude_deg, self.longitude_deg, x, y, z, vx, vy, vz)
        ]


@dataclass(frozen=True)
class Segment:
    """
    Sub-interval [seg_start, seg_end] (seconds from effective_epoch) over
    which `record` is authoritative. `remainder` is what the previous
    segment's step grid carried in.
    """
    index: int
    record: ElementRecord
    effective_epoch: int
    seg_start: int
    seg_end: int
    remainder: int


class PropagationObserver(Protocol):
    """
    Plugin interface for progress/reporting.
    Invoked by the engine; never changes control flow.
    """

    def on_segment_start(self, sat_id: int, segment: Segment, request: PropagationRequest) -> None:
        ...

    def on_row(self, sat_id: int, row: OutputRow, row_count: int) -> None:
        ...

    def on_segment_end(self, sat_id: int, segment: Segment, reached_offset: int,
                       row_count: int, request: PropagationRequest) -> None:
        ...

    def on_sample_error(self, sat_id: int, segment: Segment, offset_s: int, error: PropagationError) -> None:
        ...

    def on_record_error(self, sat_id: int, record_index: int, error: PropagationError) -> None:
        ...


class BaseObserver:
    """No-op observer; subclass and override what you need."""

    def on_segment_start(self, sat_id, segment, request):
        pass

    def on_row(self, sat_id, row, row_count):
        pass

    def on_segment_end(self, sat_id, segment, reached_offset, row_count, request):
        pass

    def on_sample_error(self, sat_id, segment, offset_s, error):
        pass

    def on_record_error(self, sat_id, record_index, error):
        pass


def segment_bounds(effective_epoch: int, next_epoch: Optional[int], request: PropagationRequest,
                   remainder: int, first: bool) -> Tuple[int, int]:
    """
    Offsets (s, relative to effective_epoch) bounding one record's segment.

    The first segment starts on the window start; later ones continue the
    step grid from the carried remainder.
    """
    seg_start = request.start - effective_epoch if first else remainder
    if next_epoch is None or next_epoch >= request.end:
        seg_end = request.end - effective_epoch
    else:
        seg_end = next_epoch - effective_epoch
    return seg_start, seg_end


@dataclass
class StitchingEngine:
    """
    Segmentation and stitching over one HistoricSet.

    Deterministic replay: same store + request => same rows.
    Rows are yielded as they are produced; nothing is buffered.
    """
    propagator: Propagator = field(default_factory=Sgp4Propagator)
    projector: Projector = ground_project
    observers: List[PropagationObserver] = field(default_factory=list)

    def effective_epoch(self, record: ElementRecord) -> int:
        """Epoch as the propagator itself reconstructs it at offset 0."""
        return self.propagator.propagate(record, 0.0).time_unix

    def run(self, store: HistoricSet, request: PropagationRequest) -> Iterator[OutputRow]:
        """
        Yield the stitched rows for `request`.

        Raises CoverageGapError (before any row is yielded) when the records
        do not cover the window start, and PropagationError (also before any
        row) when the earliest record cannot be evaluated at its own epoch.
        Later records that cannot be are skipped; the record before them
        stays authoritative up to the next usable one.
        """
        records: Sequence[ElementRecord] = store.records()
        if not records:
            logger.debug("Object %d has no element records; nothing to propagate", store.sat_id)
            return

        initial_found = False
        remainder = 0
        row_count = 0
        i: Optional[int] = 0
        eff_i = self.effective_epoch(records[0])

        while i is not None:
            if i == 0 and request.start < eff_i:
                logger.error("Object %d: earliest element epoch is %d, after start %d",
                             store.sat_id, eff_i, request.start)
                raise CoverageGapError(
                    store.sat_id, i, "start time is before the earliest element epoch",
                    earliest_epoch=eff_i, request_start=request.start,
                )
            if initial_found and eff_i >= request.end:
                break

            j, eff_j = self._next_usable(store.sat_id, records, i)

            first = not initial_found
            if not initial_found:
                if j is not None and eff_j <= request.start:
                    i, eff_i = j, eff_j
                    continue
                # eff_i <= start here: record 0 passed the start check and
                # later records are only reached through eff_j <= start
                initial_found = True

            seg_start, seg_end = segment_bounds(eff_i, eff_j, request, remainder, first)
            segment = Segment(
                index=i,
                record=records[i],
                effective_epoch=eff_i,
                seg_start=seg_start,
                seg_end=seg_end,
                remainder=remainder,
            )
            remainder, row_count = yield from self._sample_segment(store.sat_id, segment, request, row_count)
            i, eff_i = j, eff_j

    def _next_usable(self, sat_id: int, records: Sequence[ElementRecord],
                     i: int) -> Tuple[Optional[int], Optional[int]]:
        """Index and effective epoch of the first record after i the propagator can evaluate."""
        for j in range(i + 1, len(records)):
            try:
                return j, self.effective_epoch(records[j])
            except PropagationError as e:
                logger.warning("Object %d, record %d: element epoch could not be propagated (%s); record skipped",
                               sat_id, j, e)
                for obs in self.observers:
                    obs.on_record_error(sat_id, j, e)
        return None, None

    def _sample_segment(self, sat_id: int, segment: Segment, request: PropagationRequest,
                        row_count: int):
        for obs in self.observers:
            obs.on_segment_start(sat_id, segment, request)

        tt = segment.seg_start
        while tt <= segment.seg_end:
            try:
                state = self.propagator.propagate(segment.record, tt / SECONDS_PER_MINUTE)
            except PropagationError as e:
                logger.warning("Object %d, record %d: propagation failed at %+d s (%s); segment truncated",
                               sat_id, segment.index, tt, e)
                for obs in self.observers:
                    obs.on_sample_error(sat_id, segment, tt, e)
                break

            lat, lon = self.projector(state)
            row = OutputRow(
                timestamp=state.time_unix,
                latitude_deg=lat,
                longitude_deg=normalize_longitude_deg(lon),
                position_km=state.position_km,
                velocity_km_s=state.velocity_km_s,
            )
            row_count += 1
            for obs in self.observers:
                obs.on_row(sat_id, row, row_count)
            yield row
            tt += request.step

        for obs in self.observers:
            obs.on_segment_end(sat_id, segment, tt, row_count, request)

        # How far the grid overshot (or, after a failure, fell short of) seg_end
        return tt - segment.seg_end, row_count


def propagate(store: HistoricSet, request: PropagationRequest,
              propagator: Optional[Propagator] = None,
              projector: Projector = ground_project,
              observers: Optional[List[PropagationObserver]] = None) -> Iterator[OutputRow]:
    """Stitch one object's records over the request window."""
    engine = StitchingEngine(
        propagator=propagator or Sgp4Propagator(),
        projector=projector,
        observers=list(observers or []),
    )
    return engine.run(store, request)
