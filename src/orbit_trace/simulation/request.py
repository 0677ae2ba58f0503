from __future__ import annotations

from dataclasses import dataclass

# Beyond either limit a pass is likely to take a long time
LONG_SPAN_HOURS: float = 48.0
LONG_STEP_COUNT: int = 10_000


@dataclass(frozen=True)
class PropagationRequest:
    """
    Window [start, end] sampled every `step` seconds.

    Units:
        start, end: UNIX time (s)
        step: seconds between samples
    """
    start: int
    end: int
    step: int
    verbose: bool = False

    def __post_init__(self):
        if self.step <= 0:
            raise ValueError(f"step must be positive. Got: {self.step}")
        if self.end < self.start:
            raise ValueError(f"end must be >= start. Got: start={self.start}, end={self.end}")

    @classmethod
    def from_points(cls, start: int, step: int, points: int, verbose: bool = False) -> "PropagationRequest":
        """Window of `points` steps from `start` (the end time follows)."""
        if points <= 0:
            raise ValueError(f"points must be positive. Got: {points}")
        return cls(start=start, end=start + step * points, step=step, verbose=verbose)

    @property
    def span_s(self) -> int:
        return self.end - self.start

    @property
    def span_hours(self) -> float:
        return self.span_s / 3600.0

    @property
    def point_count(self) -> int:
        # Whole steps; a partial last step adds no point
        return self.span_s // self.step

    def is_long_running(self) -> bool:
        return self.span_hours > LONG_SPAN_HOURS or self.span_s / self.step > LONG_STEP_COUNT
