"""
Tests for .prop file writing and reading.
"""
from datetime import datetime

import pytest

from orbit_trace.simulation.engine import OutputRow
from orbit_trace.simulation.request import PropagationRequest
from orbit_trace.visualization.prop_writer import (
    PROP_COLUMNS,
    prop_path,
    read_prop_file,
    write_prop_file,
)


@pytest.fixture
def rows():
    return [
        OutputRow(1700000000, 12.5, -45.25, (6800.0, 10.5, -3.125), (0.5, 7.5, 1.0)),
        OutputRow(1700000060, 13.0, -42.0, (6790.0, 400.0, 20.0), (-0.25, 7.5, 1.0)),
    ]


@pytest.fixture
def request_window():
    return PropagationRequest(start=1700000000, end=1700000060, step=60)


class TestWrite:
    def test_layout(self, tmp_path, rows, request_window):
        out = tmp_path / "run" / "25544.prop"
        count = write_prop_file(rows, request_window, out, generated_at=datetime(2024, 1, 1, 12, 0, 0))

        assert count == 2
        lines = out.read_text(encoding="utf-8").splitlines()
        assert lines[:6] == [
            "File generation time,2024-01-01 12:00:00",
            "Time (start),1700000000",
            "Time (end),1700000060",
            "Time (step),60",
            "Points,1",
            ",".join(PROP_COLUMNS),
        ]
        assert lines[6] == ("2023-11-14 22:13:20,1700000000,12.500000,-45.250000,"
                            "6800.000000,10.500000,-3.125000,0.500000,7.500000,1.000000")
        assert len(lines) == 8

    def test_streams_generator(self, tmp_path, request_window, rows):
        count = write_prop_file((r for r in rows), request_window, tmp_path / "x.prop")
        assert count == 2

    def test_empty_rows(self, tmp_path, request_window):
        out = tmp_path / "empty.prop"
        assert write_prop_file([], request_window, out) == 0
        metadata, read_rows = read_prop_file(out)
        assert read_rows == []
        assert metadata["Points"] == 1

    def test_prop_path(self, tmp_path):
        assert prop_path(tmp_path, 25544) == tmp_path / "25544.prop"


class TestRead:
    def test_read_back(self, tmp_path, rows, request_window):
        out = tmp_path / "25544.prop"
        write_prop_file(rows, request_window, out, generated_at=datetime(2024, 1, 1))

        metadata, read_rows = read_prop_file(out)

        assert metadata == {
            "File generation time": "2024-01-01 00:00:00",
            "Time (start)": 1700000000,
            "Time (end)": 1700000060,
            "Time (step)": 60,
            "Points": 1,
        }
        assert read_rows == rows

    def test_bad_row(self, tmp_path):
        out = tmp_path / "bad.prop"
        out.write_text(",".join(PROP_COLUMNS) + "\n2023-11-14 22:13:20,1700000000,1.0\n")
        with pytest.raises(ValueError, match="expected 10 fields"):
            read_prop_file(out)

    def test_missing_header(self, tmp_path):
        out = tmp_path / "bad.prop"
        out.write_text("Time (start),1700000000\n")
        with pytest.raises(ValueError, match="column header not found"):
            read_prop_file(out)
