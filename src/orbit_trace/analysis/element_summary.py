"""
Per-element-set orbital parameter table.

One line per TLE with the parameters used to filter a catalog: NORAD id,
inclination, eccentricity, period, argument of perigee, RAAN and mean
anomaly.
"""
from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Union

from orbit_trace.core.constants import MINUTES_PER_DAY
from orbit_trace.core.tle import TLE

SUMMARY_HEADER = ["NORAD's ID", "inc", "ecc", "period", "perig", "long_a_n", "m_an"]


@dataclass(frozen=True)
class ElementSummary:
    norad_id: int
    inclination_deg: float
    eccentricity: float
    period_min: float
    argument_of_perigee_deg: float
    raan_deg: float
    mean_anomaly_deg: float

    def as_csv_fields(self) -> List[str]:
        return [
            str(self.norad_id),
            f"{self.inclination_deg:.3f}",
            f"{self.eccentricity:.6f}",
            f"{self.period_min:.3f}",
            f"{self.argument_of_perigee_deg:.3f}",
            f"{self.raan_deg:.3f}",
            f"{self.mean_anomaly_deg:.3f}",
        ]


def summarize_tle(tle: TLE) -> ElementSummary:
    if tle.mean_motion_rev_day <= 0:
        raise ValueError(f"Mean motion must be positive. Got: {tle.mean_motion_rev_day}")
    return ElementSummary(
        norad_id=tle.catalog_number,
        inclination_deg=tle.inclination_deg,
        eccentricity=tle.eccentricity,
        period_min=MINUTES_PER_DAY / tle.mean_motion_rev_day,
        argument_of_perigee_deg=tle.argument_of_perigee_deg,
        raan_deg=tle.raan_deg,
        mean_anomaly_deg=tle.mean_anomaly_deg,
    )


def write_summary_csv(summaries: Iterable[ElementSummary], out_path: Union[str, Path]) -> int:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(SUMMARY_HEADER)
        for s in summaries:
            writer.writerow(s.as_csv_fields())
            count += 1
    return count
