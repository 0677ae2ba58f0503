"""
Single-epoch propagation primitive.

Maps one element record and a time offset from its epoch to a TEME state
vector. The stitching engine only ever talks to the `Propagator` protocol;
`Sgp4Propagator` is the SGP4 implementation backed by the ``sgp4`` library.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Protocol

from sgp4.api import SGP4_ERRORS, Satrec

from orbit_trace.core.constants import (
    JD_UNIX_EPOCH,
    MINUTES_PER_DAY,
    SECONDS_PER_DAY,
    SECONDS_PER_MINUTE,
)
from orbit_trace.core.errors import PropagationError
from orbit_trace.core.frames import Vector3


@dataclass(frozen=True)
class PropagatedState:
    """
    Output of the propagation primitive.

    time_unix is the primitive's own reconstruction of the sample time,
    truncated to whole seconds; julian_date keeps the exact instant.
    """
    time_unix: int
    julian_date: float
    position_km: Vector3
    velocity_km_s: Vector3


class Propagator(Protocol):
    """
    Interface for single-epoch propagators.
    Raises PropagationError when no state can be computed at the offset.
    """

    def propagate(self, record: Any, offset_minutes: float) -> PropagatedState:
        ...


def build_satrec(line1: str, line2: str) -> Satrec:
    return Satrec.twoline2rv(line1, line2)


def satrec_epoch_unix(sat: Satrec) -> float:
    """Raw element epoch in UNIX seconds."""
    return (sat.jdsatepoch - JD_UNIX_EPOCH) * SECONDS_PER_DAY + sat.jdsatepochF * SECONDS_PER_DAY


def _whole_seconds(t_unix: float) -> int:
    # Rounding to the microsecond first absorbs Julian-date float noise
    return math.floor(round(t_unix, 6))


class Sgp4Propagator:
    """
    SGP4/SDP4 propagation of ElementRecords whose payload is a ``Satrec``.
    """

    def propagate(self, record: Any, offset_minutes: float) -> PropagatedState:
        """
        Propagate from the record epoch.

        Args:
            record: ElementRecord with a Satrec payload
            offset_minutes: time since epoch (minutes, may be negative)

        Returns:
            PropagatedState in TEME (km, km/s)
        """
        sat: Satrec = record.payload
        jd = sat.jdsatepoch
        fr = sat.jdsatepochF + offset_minutes / MINUTES_PER_DAY

        code, r, v = sat.sgp4(jd, fr)
        if code != 0:
            message = SGP4_ERRORS.get(code, f"unknown SGP4 error {code}")
            raise PropagationError(message, code=code, offset_minutes=offset_minutes)
        if not all(math.isfinite(c) for c in (*r, *v)):
            raise PropagationError("non-finite state", offset_minutes=offset_minutes)

        # Sample time is rebuilt from the epoch so whole-second offsets stay exact
        t_unix = satrec_epoch_unix(sat) + offset_minutes * SECONDS_PER_MINUTE

        return PropagatedState(
            time_unix=_whole_seconds(t_unix),
            julian_date=jd + fr,
            position_km=(r[0], r[1], r[2]),
            velocity_km_s=(v[0], v[1], v[2]),
        )
