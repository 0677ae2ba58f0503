from orbit_trace.objects.element_record import ElementRecord
from orbit_trace.objects.historic_set import HistoricSet

__all__ = ["ElementRecord", "HistoricSet"]
