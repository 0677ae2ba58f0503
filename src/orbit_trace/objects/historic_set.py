from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from orbit_trace.objects.element_record import ElementRecord


@dataclass
class HistoricSet:
    """
    Element records of ONE tracked object, kept in strictly ascending epoch
    order with no duplicate epochs.

    Keep this pure: insertion and ordered reads only. Records are never
    removed and never handed out by mutable reference.
    """
    sat_id: int
    name: str = ""
    _records: List[ElementRecord] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def with_record(cls, sat_id: int, name: str, record: ElementRecord) -> "HistoricSet":
        hs = cls(sat_id=sat_id, name=name)
        hs.insert(record)
        return hs

    def insert(self, record: ElementRecord) -> bool:
        """
        Insert a record. Returns False (and does nothing) when a record with
        the same epoch is already held.
        """
        idx = bisect_left(self._records, record)
        if idx < len(self._records) and self._records[idx] == record:
            return False
        self._records.insert(idx, record)
        return True

    def size(self) -> int:
        return len(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def iterate(self) -> Iterator[ElementRecord]:
        return iter(tuple(self._records))

    def __iter__(self) -> Iterator[ElementRecord]:
        return self.iterate()

    def records(self) -> Tuple[ElementRecord, ...]:
        return tuple(self._records)

    def first(self) -> Optional[ElementRecord]:
        return self._records[0] if self._records else None

    def last(self) -> Optional[ElementRecord]:
        return self._records[-1] if self._records else None

    @property
    def display_name(self) -> str:
        return self.name or "(unknown name)"

    def describe(self) -> List[str]:
        """One line per record: index, object id and epoch."""
        lines = [f"Displaying data for {self.display_name}: {self.sat_id}"]
        for count, rec in enumerate(self._records):
            lines.append(f"{count} ({self.sat_id}): {rec.epoch.isoformat()}")
        return lines
