"""
Shared fixtures: a deterministic stand-in for the SGP4 primitive.

The fake reports the record epoch (whole seconds) as effective epoch, puts
the record epoch in position x and the offset in position y so tests can
tell which record produced a row.
"""
from dataclasses import dataclass, field
from typing import List, Set, Tuple

import pytest

from orbit_trace.core.errors import PropagationError
from orbit_trace.core.propagator import PropagatedState
from orbit_trace.objects.element_record import ElementRecord
from orbit_trace.objects.historic_set import HistoricSet


@dataclass
class FakePropagator:
    fail_at: Set[Tuple[int, int]] = field(default_factory=set)  # (record epoch, offset_s)
    calls: List[Tuple[int, int]] = field(default_factory=list)

    def propagate(self, record, offset_minutes):
        epoch = int(record.epoch_unix)
        offset_s = round(offset_minutes * 60.0)
        self.calls.append((epoch, offset_s))
        if (epoch, offset_s) in self.fail_at:
            raise PropagationError("satellite has decayed", code=6, offset_minutes=offset_minutes)
        return PropagatedState(
            time_unix=epoch + offset_s,
            julian_date=2440587.5 + (epoch + offset_s) / 86400.0,
            position_km=(float(epoch), float(offset_s), 0.0),
            velocity_km_s=(0.0, 7.5, 0.0),
        )



@pytest.fixture
def fake_propagator():
    return FakePropagator()


@pytest.fixture
def make_store():
    def _make(*epochs, sat_id=25544, name="TESTSAT"):
        store = HistoricSet(sat_id=sat_id, name=name)
        for e in epochs:
            store.insert(ElementRecord(epoch_unix=float(e), payload=None, catalog_number=sat_id, name=name))
        return store
    return _make
