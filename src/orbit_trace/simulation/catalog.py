from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from orbit_trace.core.tle import PathLike, TLE, iter_tle_files, load_tle_from_file
from orbit_trace.objects.element_record import ElementRecord
from orbit_trace.objects.historic_set import HistoricSet

logger = logging.getLogger(__name__)


@dataclass
class Catalog:
    """
    One HistoricSet per tracked object, keyed by catalog number.
    Keep this pure: just data + lookup, no propagation logic.
    """
    sets: Dict[int, HistoricSet] = field(default_factory=dict)

    def add_record(self, record: ElementRecord) -> bool:
        """
        Route a record to its object's set, registering the object on first
        sight. Returns False when the epoch was already known.
        """
        hs = self.sets.get(record.catalog_number)
        if hs is None:
            hs = HistoricSet(sat_id=record.catalog_number, name=record.name)
            self.sets[record.catalog_number] = hs
        elif not hs.name and record.name:
            hs.name = record.name

        inserted = hs.insert(record)
        if not inserted:
            logger.debug("Object %d: duplicate epoch %s ignored", record.catalog_number, record.epoch.isoformat())
        return inserted

    def add_tle(self, tle: TLE) -> bool:
        return self.add_record(ElementRecord.from_tle(tle))

    def get(self, sat_id: int) -> Optional[HistoricSet]:
        return self.sets.get(sat_id)

    def sat_ids(self) -> List[int]:
        return sorted(self.sets)

    def set_list(self) -> List[HistoricSet]:
        return [self.sets[k] for k in self.sat_ids()]

    def __len__(self) -> int:
        return len(self.sets)

    @classmethod
    def from_paths(cls, paths: Iterable[PathLike]) -> "Catalog":
        """Ingest every TLE found in the given files or directories."""
        catalog = cls()
        for path in paths:
            for tle_file in iter_tle_files(path):
                tles = load_tle_from_file(tle_file)
                added = 0
                for tle in tles:
                    try:
                        if catalog.add_tle(tle):
                            added += 1
                    except ValueError as e:
                        logger.warning("%s: element set for %d rejected (%s)", tle_file, tle.catalog_number, e)
                logger.info("%s: %d TLEs read, %d new element records", tle_file, len(tles), added)
        return catalog
