from orbit_trace.simulation.systems.progress import ProgressReporter
from orbit_trace.simulation.systems.table import TableReporter

__all__ = ["ProgressReporter", "TableReporter"]
