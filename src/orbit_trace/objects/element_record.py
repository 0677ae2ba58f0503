from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from orbit_trace.core.propagator import build_satrec, satrec_epoch_unix
from orbit_trace.core.tle import TLE


@dataclass(frozen=True, order=True)
class ElementRecord:
    """
    An immutable orbital element snapshot.

    Ordered and compared by reference epoch only: two records with the same
    epoch are the same record as far as a HistoricSet is concerned.
    The payload is opaque here; only the propagator knows how to use it.
    """
    epoch_unix: float
    payload: Any = field(compare=False, repr=False)
    catalog_number: int = field(default=0, compare=False)
    name: str = field(default="", compare=False)
    tle: Optional[TLE] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_tle(cls, tle: TLE) -> "ElementRecord":
        """Build a fresh record (SGP4 payload) from a parsed TLE."""
        sat = build_satrec(tle.line1, tle.line2)
        return cls(
            epoch_unix=satrec_epoch_unix(sat),
            payload=sat,
            catalog_number=tle.catalog_number,
            name=tle.line0,
            tle=tle,
        )

    @property
    def epoch(self) -> datetime:
        return datetime.fromtimestamp(self.epoch_unix, tz=timezone.utc)
