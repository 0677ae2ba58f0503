from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, TextIO, Union

from orbit_trace.core.errors import CoverageGapError, PropagationError
from orbit_trace.core.propagator import Propagator, Sgp4Propagator
from orbit_trace.objects.historic_set import HistoricSet
from orbit_trace.simulation.catalog import Catalog
from orbit_trace.simulation.engine import PropagationObserver, StitchingEngine
from orbit_trace.simulation.request import PropagationRequest
from orbit_trace.simulation.systems import ProgressReporter, TableReporter
from orbit_trace.visualization.prop_writer import prop_path, write_prop_file

logger = logging.getLogger(__name__)


@dataclass
class BatchReport:
    """Outcome of a catalog pass, per object id."""
    completed: Dict[int, int] = field(default_factory=dict)  # sat_id -> rows written
    coverage_gaps: Dict[int, CoverageGapError] = field(default_factory=dict)
    failed: Dict[int, PropagationError] = field(default_factory=dict)
    skipped: List[int] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return sum(self.completed.values())


def propagate_object(
    store: HistoricSet,
    request: PropagationRequest,
    output_dir: Union[str, Path],
    propagator: Optional[Propagator] = None,
    stream: Optional[TextIO] = None,
) -> int:
    """
    One object's pass into <output_dir>/<sat_id>.prop.
    Returns the row count; CoverageGapError propagates after the partial
    file is removed.
    """
    out_path = prop_path(output_dir, store.sat_id)
    observers: List[PropagationObserver] = [ProgressReporter(label=str(out_path))]
    if request.verbose:
        observers.append(TableReporter(stream=stream) if stream is not None else TableReporter())

    engine = StitchingEngine(propagator=propagator or Sgp4Propagator(), observers=observers)
    try:
        return write_prop_file(engine.run(store, request), request, out_path)
    except (CoverageGapError, PropagationError):
        out_path.unlink(missing_ok=True)
        raise


def propagate_catalog(
    catalog: Catalog,
    request: PropagationRequest,
    output_dir: Union[str, Path],
    propagator: Optional[Propagator] = None,
    stream: Optional[TextIO] = None,
) -> BatchReport:
    """
    Propagate every object of the catalog, in ascending id order.
    A failure of one object never stops the others.
    """
    if request.is_long_running():
        logger.warning("With the given setup (%.1f h, %d points) the propagation will probably take a long time",
                       request.span_hours, request.point_count)

    propagator = propagator or Sgp4Propagator()
    report = BatchReport()

    for store in catalog.set_list():
        if not store.size():
            logger.warning("Object %d has no element records, skipped", store.sat_id)
            report.skipped.append(store.sat_id)
            continue

        logger.info("%d: %s (%d element sets)", store.sat_id, store.display_name, store.size())
        try:
            rows = propagate_object(store, request, output_dir, propagator=propagator, stream=stream)
        except CoverageGapError as e:
            logger.error("%d: %s", store.sat_id, e)
            report.coverage_gaps[store.sat_id] = e
            continue
        except PropagationError as e:
            # Only an unusable record epoch gets here; sample failures are recovered in the engine
            logger.error("%d: element epoch could not be propagated (%s)", store.sat_id, e)
            report.failed[store.sat_id] = e
            continue

        report.completed[store.sat_id] = rows
        logger.info("%d: %d points written", store.sat_id, rows)

    return report
