"""orbit_trace - stitch historic TLE sets into continuous trajectory traces."""

from orbit_trace.core.errors import CoverageGapError, OrbitTraceError, PropagationError
from orbit_trace.objects.element_record import ElementRecord
from orbit_trace.objects.historic_set import HistoricSet
from orbit_trace.simulation.engine import OutputRow, StitchingEngine, propagate
from orbit_trace.simulation.request import PropagationRequest

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CoverageGapError",
    "OrbitTraceError",
    "PropagationError",
    "ElementRecord",
    "HistoricSet",
    "OutputRow",
    "StitchingEngine",
    "propagate",
    "PropagationRequest",
]
