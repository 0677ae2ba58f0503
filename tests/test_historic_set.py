"""
Tests for ElementRecord ordering and the HistoricSet container.
"""
from datetime import datetime, timezone

import pytest

from orbit_trace.objects.element_record import ElementRecord
from orbit_trace.objects.historic_set import HistoricSet


def rec(epoch, payload=None, name=""):
    return ElementRecord(epoch_unix=float(epoch), payload=payload, catalog_number=5, name=name)


class TestElementRecord:
    def test_equality_is_by_epoch_only(self):
        assert rec(100, payload="a", name="X") == rec(100, payload="b", name="Y")
        assert rec(100) != rec(101)

    def test_ordering_by_epoch(self):
        assert sorted([rec(30), rec(10), rec(20)]) == [rec(10), rec(20), rec(30)]

    def test_epoch_is_utc(self):
        assert rec(0).epoch == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_immutable(self):
        with pytest.raises(AttributeError):
            rec(0).epoch_unix = 5.0


class TestHistoricSet:
    def test_insert_keeps_ascending_order(self):
        hs = HistoricSet(sat_id=5)
        for e in (300, 100, 200, 50):
            assert hs.insert(rec(e))

        assert [r.epoch_unix for r in hs.iterate()] == [50.0, 100.0, 200.0, 300.0]
        assert hs.first().epoch_unix == 50.0
        assert hs.last().epoch_unix == 300.0

    def test_duplicate_epoch_is_noop(self):
        hs = HistoricSet(sat_id=5)
        assert hs.insert(rec(100, payload="first"))
        assert hs.insert(rec(100, payload="second")) is False

        assert hs.size() == 1
        assert hs.first().payload == "first"

    def test_size_counts_distinct_epochs(self):
        hs = HistoricSet(sat_id=5)
        for e in (1, 2, 2, 3, 1, 4):
            hs.insert(rec(e))
        assert hs.size() == 4
        assert len(hs) == 4

    def test_iteration_is_restartable(self):
        hs = HistoricSet(sat_id=5)
        for e in (1, 2, 3):
            hs.insert(rec(e))
        assert list(hs) == list(hs)
        assert hs.records() == tuple(hs.iterate())

    def test_iteration_is_a_snapshot(self):
        hs = HistoricSet(sat_id=5)
        hs.insert(rec(1))
        it = hs.iterate()
        hs.insert(rec(0))
        assert [r.epoch_unix for r in it] == [1.0]

    def test_empty_set(self):
        hs = HistoricSet(sat_id=5)
        assert hs.size() == 0
        assert hs.first() is None
        assert hs.last() is None
        assert list(hs) == []

    def test_with_record(self):
        hs = HistoricSet.with_record(5, "SAT", rec(10))
        assert hs.sat_id == 5
        assert hs.name == "SAT"
        assert hs.size() == 1

    def test_describe(self):
        hs = HistoricSet(sat_id=5, name="SAT")
        hs.insert(rec(86400))
        hs.insert(rec(0))
        assert hs.describe() == [
            "Displaying data for SAT: 5",
            "0 (5): 1970-01-01T00:00:00+00:00",
            "1 (5): 1970-01-02T00:00:00+00:00",
        ]

    def test_display_name_fallback(self):
        assert HistoricSet(sat_id=5).display_name == "(unknown name)"
