from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import TextIO

from orbit_trace.simulation.engine import BaseObserver, OutputRow, Segment
from orbit_trace.simulation.request import PropagationRequest

_TOP = "┏" + "━" * 34 + "┳" + "━" * 25 + "┳" + "━" * 43 + "┳" + "━" * 34 + "┓"
_MID = "┢" + "━" * 34 + "╈" + "━" * 25 + "╈" + "━" * 43 + "╈" + "━" * 34 + "┪"
_TITLES = ("┃ Time stamp                       ┃         LAT         LON ┃"
           "         ECI X         ECI Y         ECI Z ┃      vel X      vel Y      vel Z ┃")
_RULE = "┡" + "━" * 34 + "╇" + "━" * 25 + "╇" + "━" * 43 + "╇" + "━" * 34 + "┩"
_FOOT = "└" + "─" * 34 + "┴" + "─" * 25 + "┴" + "─" * 43 + "┴" + "─" * 34 + "┘"


def format_table_row(row: OutputRow) -> str:
    x, y, z = row.position_km
    vx, vy, vz = row.velocity_km_s
    return (
        f"│{row.timestamp: 10d} ({row.formatted_timestamp}) │ "
        f"{row.latitude_deg: 11.6f} {row.longitude_deg: 11.6f} │ "
        f"{x: 13.6f} {y: 13.6f} {z: 13.6f} │ "
        f"{vx: 10.6f} {vy: 10.6f} {vz: 10.6f} │"
    )


@dataclass
class TableReporter(BaseObserver):
    """
    Verbose output: every row as a box-drawn table line.
    The header is repeated every `header_every` rows; each segment gets
    its own table.
    """
    stream: TextIO = field(default_factory=lambda: sys.stdout)
    header_every: int = 50
    name: str = "table"

    def _header(self, first: bool) -> None:
        print(_TOP if first else _MID, file=self.stream)
        print(_TITLES, file=self.stream)
        print(_RULE, file=self.stream)

    def on_segment_start(self, sat_id: int, segment: Segment, request: PropagationRequest) -> None:
        self._header(first=True)

    def on_row(self, sat_id: int, row: OutputRow, row_count: int) -> None:
        if row_count > 1 and row_count % self.header_every == 0:
            self._header(first=False)
        print(format_table_row(row), file=self.stream)

    def on_segment_end(self, sat_id: int, segment: Segment, reached_offset: int,
                       row_count: int, request: PropagationRequest) -> None:
        print(_FOOT, file=self.stream)
