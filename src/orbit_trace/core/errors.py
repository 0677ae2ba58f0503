"""Exception classes for orbit_trace errors."""

from __future__ import annotations

from typing import Optional


class OrbitTraceError(Exception):
    """Base exception for orbit_trace errors."""

    pass


class CoverageGapError(OrbitTraceError):
    """
    The known element records do not cover the requested window.

    Fatal for the propagation pass of one object only; callers decide
    whether to skip the object or abort the run.
    """

    def __init__(self, sat_id: int, record_index: int, reason: str,
                 earliest_epoch: Optional[int] = None,
                 request_start: Optional[int] = None):
        self.sat_id = sat_id
        self.record_index = record_index
        self.reason = reason
        self.earliest_epoch = earliest_epoch
        self.request_start = request_start
        super().__init__(f"Coverage gap for object {sat_id} (record {record_index}): {reason}")


class PropagationError(OrbitTraceError):
    """The propagation primitive could not compute a state at one offset."""

    def __init__(self, message: str, code: int = 0, offset_minutes: Optional[float] = None):
        self.code = code
        self.offset_minutes = offset_minutes
        super().__init__(message)
