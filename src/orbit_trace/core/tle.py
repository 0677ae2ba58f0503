"""
Two-Line Element (TLE) text decoding.

The propagator builds its own payload from the raw lines (``sgp4``); the
decoded fields here are used for naming, grouping by catalog number and
the element summary table.

    ISS (ZARYA)                                                   <- optional name
    1 25544U 98067A   21275.51020370  .00003026  00000-0  63146-4 0  9993
    2 25544  51.6454 297.5612 0003681  73.8901  43.4185 15.48957534303374
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterator, List, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Two-digit epoch years below this are 20xx, the rest 19xx
_Y2K_PIVOT = 57


@dataclass
class TLE:
    """One decoded element set, raw lines included."""
    line0: str
    line1: str
    line2: str

    # line 1
    catalog_number: int = 0
    classification: str = "U"
    international_designator: str = ""
    epoch_year: int = 0
    epoch_day: float = 0.0
    mean_motion_derivative: float = 0.0
    mean_motion_second_derivative: float = 0.0
    bstar: float = 0.0
    element_set_number: int = 0

    # line 2 (angles in degrees, mean motion in rev/day)
    inclination_deg: float = 0.0
    raan_deg: float = 0.0
    eccentricity: float = 0.0
    argument_of_perigee_deg: float = 0.0
    mean_anomaly_deg: float = 0.0
    mean_motion_rev_day: float = 0.0
    revolution_number: int = 0

    @property
    def epoch(self) -> datetime:
        """UTC epoch; day-of-year 1.0 is January 1st at midnight."""
        jan1 = datetime(self.epoch_year, 1, 1, tzinfo=timezone.utc)
        return jan1 + timedelta(days=self.epoch_day - 1.0)


def _full_year(two_digit: int) -> int:
    return two_digit + (2000 if two_digit < _Y2K_PIVOT else 1900)


def _implied_decimal(text: str) -> float:
    # Eccentricity is written without its leading "0."
    return float("0." + text)


def _optional(cast: Callable[[str], float]) -> Callable[[str], float]:
    return lambda text: cast(text) if text else 0


def parse_exponential_notation(s: str) -> float:
    """
    Decode a TLE exponent field: ``63146-4`` is 0.63146e-4, an optional
    leading sign applies to the mantissa.
    """
    s = s.strip()
    if not s:
        return 0.0

    sign = 1.0
    if s[0] in "+-":
        sign = -1.0 if s[0] == "-" else 1.0
        s = s[1:]

    digits, exponent = s[:-2], s[-2:]
    if not digits.isdigit():
        raise ValueError(f"Bad exponential field: {s!r}")
    try:
        power = int(exponent)
    except ValueError:
        raise ValueError(f"Bad exponential field: {s!r}")

    return sign * float("0." + digits) * 10.0 ** power


# (attribute, column slice, converter); columns as in the NORAD format
_LINE1_COLUMNS: Tuple[Tuple[str, slice, Callable], ...] = (
    ("catalog_number", slice(2, 7), int),
    ("classification", slice(7, 8), str),
    ("international_designator", slice(9, 17), str),
    ("epoch_year", slice(18, 20), lambda s: _full_year(int(s))),
    ("epoch_day", slice(20, 32), float),
    ("mean_motion_derivative", slice(33, 43), float),
    ("mean_motion_second_derivative", slice(44, 52), _optional(parse_exponential_notation)),
    ("bstar", slice(53, 61), _optional(parse_exponential_notation)),
    ("element_set_number", slice(64, 68), int),
)

_LINE2_COLUMNS: Tuple[Tuple[str, slice, Callable], ...] = (
    ("inclination_deg", slice(8, 16), float),
    ("raan_deg", slice(17, 25), float),
    ("eccentricity", slice(26, 33), _implied_decimal),
    ("argument_of_perigee_deg", slice(34, 42), float),
    ("mean_anomaly_deg", slice(43, 51), float),
    ("mean_motion_rev_day", slice(52, 63), float),
    ("revolution_number", slice(63, 68), _optional(int)),
)


def _decode(tle: TLE, line: str, columns: Sequence[Tuple[str, slice, Callable]], line_no: int) -> None:
    for attr, cols, convert in columns:
        text = line[cols].strip()
        try:
            setattr(tle, attr, convert(text))
        except ValueError as e:
            raise ValueError(
                f"Error parsing TLE line {line_no}, columns {cols.start + 1}-{cols.stop} ({attr}): {e}"
            )


def parse_tle(line0: str, line1: str, line2: str) -> TLE:
    """
    Decode one element set.

    Args:
        line0: name line, may be empty
        line1, line2: the two data lines

    Raises:
        ValueError: on a wrong line marker, an unreadable field or a catalog
            number that differs between the two lines
    """
    if not line1.startswith("1 "):
        raise ValueError("Line 1 must start with '1 '")
    if not line2.startswith("2 "):
        raise ValueError("Line 2 must start with '2 '")

    tle = TLE(line0=line0.strip(), line1=line1.strip(), line2=line2.strip())
    _decode(tle, line1, _LINE1_COLUMNS, 1)

    try:
        catalog_check = int(line2[2:7])
    except ValueError:
        raise ValueError(f"Error parsing TLE line 2: bad catalog number {line2[2:7]!r}")
    if catalog_check != tle.catalog_number:
        raise ValueError(f"Catalog number mismatch between lines ({tle.catalog_number} vs {catalog_check})")

    _decode(tle, line2, _LINE2_COLUMNS, 2)
    return tle


def _entries(lines: Sequence[str]) -> Iterator[Tuple[int, str, str, str]]:
    """
    (line number, name, line 1, line 2) for every candidate entry; line 2 is
    empty when the text ends early. Stray lines are dropped.
    """
    n = len(lines)
    i = 0
    while i < n:
        current = lines[i]
        following = lines[i + 1] if i + 1 < n else ""

        if not current.strip():
            i += 1
        elif current.startswith("1 "):
            yield i + 1, "", current, following
            i += 2 if following.startswith("2 ") else 1
        elif following.startswith("1 "):
            third = lines[i + 2] if i + 2 < n else ""
            yield i + 1, current, following, third
            i += 3 if third.startswith("2 ") else 2
        else:
            logger.debug("line %d: not part of an element set, skipped", i + 1)
            i += 1


def parse_tle_lines(lines: Sequence[str], source: str = "<string>") -> List[TLE]:
    """
    Decode every element set in `lines` (two- or three-line entries, mixed
    freely). Incomplete and malformed entries are logged and skipped.
    """
    tles: List[TLE] = []
    for line_no, name, line1, line2 in _entries([line.rstrip("\r\n") for line in lines]):
        if not line2.startswith("2 "):
            logger.warning("%s:%d: incomplete TLE, skipping", source, line_no)
            continue
        try:
            tles.append(parse_tle(name, line1, line2))
        except ValueError as e:
            logger.warning("%s:%d: malformed TLE skipped (%s)", source, line_no, e)
    return tles


def load_tle_from_file(filepath: PathLike) -> List[TLE]:
    """Every element set found in one text file."""
    text = Path(filepath).read_text(encoding="utf-8", errors="replace")
    return parse_tle_lines(text.splitlines(), source=str(filepath))


def iter_tle_files(path: PathLike) -> Iterator[Path]:
    """
    The file itself, or each regular, non-hidden file of a directory in name
    order. Raises FileNotFoundError for anything else.
    """
    path = Path(path)
    if path.is_file():
        yield path
        return
    if not path.is_dir():
        raise FileNotFoundError(f"TLE path not found: {path}")
    yield from (p for p in sorted(path.iterdir()) if p.is_file() and not p.name.startswith("."))


def tle_from_string(tle_string: str) -> TLE:
    """Decode a single two- or three-line element set."""
    lines = [line.strip() for line in tle_string.splitlines() if line.strip()]
    if len(lines) not in (2, 3):
        raise ValueError(f"TLE string must contain 2 or 3 lines, got {len(lines)}")
    if len(lines) == 2:
        lines.insert(0, "")
    return parse_tle(*lines)


EXAMPLE_ISS_TLE = """ISS (ZARYA)
1 25544U 98067A   21275.51020370  .00003026  00000-0  63146-4 0  9993
2 25544  51.6454 297.5612 0003681  73.8901  43.4185 15.48957534303374"""

EXAMPLE_STARLINK_TLE = """STARLINK-1007
1 44713U 19074A   21275.50886752  .00001156  00000-0  93328-4 0  9998
2 44713  53.0534 123.4578 0001387  87.6543 272.4623 15.06380957106897"""
