from orbit_trace.core.tle import EXAMPLE_ISS_TLE, tle_from_string
from orbit_trace.objects.element_record import ElementRecord
from orbit_trace.objects.historic_set import HistoricSet
from orbit_trace.simulation.engine import StitchingEngine
from orbit_trace.simulation.request import PropagationRequest

record = ElementRecord.from_tle(tle_from_string(EXAMPLE_ISS_TLE))
iss = HistoricSet.with_record(record.catalog_number, record.name, record)

engine = StitchingEngine()
start = engine.effective_epoch(record)
request = PropagationRequest(start=start, end=start + 90 * 60, step=600)

for row in engine.run(iss, request):
    print(row.formatted_timestamp, f"{row.latitude_deg:8.3f}", f"{row.longitude_deg:9.3f}", row.position_km)
