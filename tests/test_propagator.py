"""
Tests for the SGP4 propagation primitive.
"""
import math
from types import SimpleNamespace

import pytest

from orbit_trace.core.errors import PropagationError
from orbit_trace.core.frames import norm
from orbit_trace.core.propagator import Sgp4Propagator, satrec_epoch_unix
from orbit_trace.core.tle import EXAMPLE_ISS_TLE, tle_from_string
from orbit_trace.objects.element_record import ElementRecord
from orbit_trace.simulation.engine import StitchingEngine
from orbit_trace.simulation.request import PropagationRequest
from orbit_trace.objects.historic_set import HistoricSet

ISS_EPOCH = 1633176881  # 2021-10-02 12:14:41.6 UTC, whole seconds


@pytest.fixture
def iss_record():
    return ElementRecord.from_tle(tle_from_string(EXAMPLE_ISS_TLE))


def stub_record(code, r=(7000.0, 0.0, 0.0), v=(0.0, 7.5, 0.0)):
    sat = SimpleNamespace(jdsatepoch=2459489.5, jdsatepochF=0.51020370,
                          sgp4=lambda jd, fr: (code, r, v))
    return ElementRecord(epoch_unix=0.0, payload=sat)


class TestSgp4Propagator:
    def test_record_epoch(self, iss_record):
        assert math.isclose(iss_record.epoch_unix, 1633176881.6, abs_tol=1e-3)
        assert iss_record.catalog_number == 25544
        assert iss_record.name == "ISS (ZARYA)"
        assert math.isclose(satrec_epoch_unix(iss_record.payload), iss_record.epoch_unix)

    def test_effective_epoch_is_whole_seconds(self, iss_record):
        state = Sgp4Propagator().propagate(iss_record, 0.0)
        assert state.time_unix == ISS_EPOCH

    def test_leo_state(self, iss_record):
        state = Sgp4Propagator().propagate(iss_record, 0.0)
        assert 6600.0 < norm(state.position_km) < 6900.0
        assert 7.5 < norm(state.velocity_km_s) < 7.8

    def test_offset_time(self, iss_record):
        state = Sgp4Propagator().propagate(iss_record, 90.0)
        assert state.time_unix == ISS_EPOCH + 5400
        assert 6600.0 < norm(state.position_km) < 6900.0

    def test_negative_offset(self, iss_record):
        state = Sgp4Propagator().propagate(iss_record, -10.0)
        assert state.time_unix == ISS_EPOCH - 600

    def test_error_code_raises(self):
        nan = float("nan")
        with pytest.raises(PropagationError, match="decayed") as excinfo:
            Sgp4Propagator().propagate(stub_record(6, (nan, nan, nan), (nan, nan, nan)), 30.0)
        assert excinfo.value.code == 6
        assert excinfo.value.offset_minutes == 30.0

    def test_non_finite_state_raises(self):
        with pytest.raises(PropagationError, match="non-finite"):
            Sgp4Propagator().propagate(stub_record(0, r=(float("inf"), 0.0, 0.0)), 0.0)


class TestRealPropagation:
    def test_iss_trace(self, iss_record):
        store = HistoricSet.with_record(25544, "ISS (ZARYA)", iss_record)
        request = PropagationRequest(start=ISS_EPOCH + 60, end=ISS_EPOCH + 660, step=60)

        rows = list(StitchingEngine().run(store, request))

        assert [r.timestamp for r in rows] == list(range(ISS_EPOCH + 60, ISS_EPOCH + 661, 60))
        for row in rows:
            assert abs(row.latitude_deg) <= 52.0
            assert -180.0 <= row.longitude_deg < 180.0
