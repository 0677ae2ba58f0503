"""
`.prop` trajectory files.

CSV framing of a propagation pass: request metadata lines, a column header,
then one line per OutputRow. csv and file I/O are confined to this module.
"""
from __future__ import annotations

import csv
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from orbit_trace.simulation.engine import TIME_FORMAT, OutputRow
from orbit_trace.simulation.request import PropagationRequest

PROP_COLUMNS = ["Time", "Timestamp", "Latitude", "Longitude", "x", "y", "z", "vx", "vy", "vz"]
PROP_SUFFIX = ".prop"


def prop_path(output_dir: Union[str, Path], sat_id: int) -> Path:
    return Path(output_dir) / f"{sat_id}{PROP_SUFFIX}"


def write_prop_file(
    rows: Iterable[OutputRow],
    request: PropagationRequest,
    out_path: Union[str, Path],
    generated_at: Optional[datetime] = None,
) -> int:
    """
    Stream `rows` into a .prop file:

        File generation time,2024-01-01 00:00:00
        Time (start),1700000000
        Time (end),1700060000
        Time (step),60
        Points,1000
        Time,Timestamp,Latitude,Longitude,x,y,z,vx,vy,vz
        2023-11-14 22:13:20,1700000000,12.345678,-45.678901,...

    Returns the number of data rows written. Exceptions raised while
    producing rows propagate; the file then holds what was written so far.
    """
    generated_at = generated_at or datetime.now()
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(["File generation time", generated_at.strftime(TIME_FORMAT)])
        writer.writerow(["Time (start)", request.start])
        writer.writerow(["Time (end)", request.end])
        writer.writerow(["Time (step)", request.step])
        writer.writerow(["Points", request.point_count])
        writer.writerow(PROP_COLUMNS)
        for row in rows:
            writer.writerow(row.as_csv_fields())
            count += 1

    return count


def read_prop_file(path: Union[str, Path]) -> Tuple[Dict[str, Any], List[OutputRow]]:
    """
    Parse a .prop file back into (metadata, rows).
    Metadata keys are the labels of the lines preceding the column header.
    """
    metadata: Dict[str, Any] = {}
    rows: List[OutputRow] = []
    in_data = False

    with open(path, "r", newline="", encoding="utf-8") as f:
        for fields in csv.reader(f):
            if not fields:
                continue
            if not in_data:
                if fields == PROP_COLUMNS:
                    in_data = True
                elif len(fields) == 2:
                    label, value = fields
                    metadata[label] = int(value) if value.lstrip("-").isdigit() else value
                continue

            if len(fields) != len(PROP_COLUMNS):
                raise ValueError(f"{path}: expected {len(PROP_COLUMNS)} fields, got {len(fields)}")
            values = [float(v) for v in fields[2:]]
            rows.append(OutputRow(
                timestamp=int(fields[1]),
                latitude_deg=values[0],
                longitude_deg=values[1],
                position_km=(values[2], values[3], values[4]),
                velocity_km_s=(values[5], values[6], values[7]),
            ))

    if not in_data:
        raise ValueError(f"{path}: column header not found")
    return metadata, rows
