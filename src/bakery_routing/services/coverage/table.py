"""Neighborhood coverage table: which locations serve which neighborhoods."""

from __future__ import annotations

import functools
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Sequence

from ...config import settings


@dataclass(slots=True, frozen=True)
class NeighborhoodCoverage:
    """One row of the coverage table.

    ``primary`` locations are the preferred servers for the neighborhood,
    ``extended`` locations can deliver there at a lower distance score.
    """

    name: str
    primary: tuple[str, ...] = ()
    extended: tuple[str, ...] = ()


class CoverageTable:
    """Ordered, immutable collection of coverage rows.

    Row order is significant: address matching walks the rows in order and the
    first match wins.
    """

    def __init__(self, rows: Sequence[NeighborhoodCoverage]) -> None:
        self._rows = tuple(rows)
        self._by_name = {row.name: row for row in self._rows}
        if len(self._by_name) != len(self._rows):
            raise ValueError("Coverage table contains duplicate neighborhood names.")

    def __iter__(self) -> Iterator[NeighborhoodCoverage]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def get(self, name: str) -> Optional[NeighborhoodCoverage]:
        return self._by_name.get(name)

    def primary_locations(self, name: str) -> tuple[str, ...]:
        row = self._by_name.get(name)
        return row.primary if row else ()

    def extended_locations(self, name: str) -> tuple[str, ...]:
        row = self._by_name.get(name)
        return row.extended if row else ()


DEFAULT_COVERAGE = CoverageTable(
    [
        # Brooklyn
        NeighborhoodCoverage("Cobble Hill", primary=("brooklyn",)),
        NeighborhoodCoverage("Carroll Gardens", primary=("brooklyn",)),
        NeighborhoodCoverage("Boerum Hill", primary=("brooklyn",)),
        NeighborhoodCoverage("Park Slope", primary=("brooklyn",)),
        NeighborhoodCoverage("Dumbo", primary=("brooklyn",)),
        NeighborhoodCoverage("Brooklyn Heights", primary=("brooklyn",)),
        NeighborhoodCoverage("Fort Greene", primary=("brooklyn",)),
        NeighborhoodCoverage("Prospect Heights", primary=("brooklyn",)),
        # Upper East Side
        NeighborhoodCoverage("Upper East Side", primary=("ues",)),
        NeighborhoodCoverage("Yorkville", primary=("ues",)),
        NeighborhoodCoverage("Lenox Hill", primary=("ues",)),
        NeighborhoodCoverage("East Harlem", primary=("ues",)),
        NeighborhoodCoverage("Roosevelt Island", primary=("ues",)),
        NeighborhoodCoverage("Midtown East", primary=("ues", "times-square")),
        # Times Square
        NeighborhoodCoverage("Hell's Kitchen", primary=("times-square",)),
        NeighborhoodCoverage("Midtown West", primary=("times-square",)),
        NeighborhoodCoverage("Theater District", primary=("times-square",)),
        NeighborhoodCoverage("Chelsea", primary=("times-square",)),
        NeighborhoodCoverage("Hudson Yards", primary=("times-square",)),
        NeighborhoodCoverage("Columbus Circle", primary=("times-square", "ues")),
        # Extended-only areas: matched by name for extended coverage, never resolved as neighborhoods
        NeighborhoodCoverage("Downtown Brooklyn", extended=("brooklyn",)),
        NeighborhoodCoverage("Williamsburg", extended=("brooklyn",)),
        NeighborhoodCoverage("Greenpoint", extended=("brooklyn",)),
        NeighborhoodCoverage("Upper West Side", extended=("ues",)),
        NeighborhoodCoverage("Central Park", extended=("ues",)),
        NeighborhoodCoverage("Greenwich Village", extended=("times-square",)),
        NeighborhoodCoverage("SoHo", extended=("times-square",)),
        NeighborhoodCoverage("Tribeca", extended=("times-square",)),
    ]
)


def parse_coverage_rows(payload: object) -> CoverageTable:
    """Build a table from a JSON-style list of ``{"name", "primary", "extended"}`` objects."""

    if not isinstance(payload, list):
        raise ValueError("Coverage table must be a JSON array of neighborhood objects.")
    rows: list[NeighborhoodCoverage] = []
    for index, entry in enumerate(payload):
        if not isinstance(entry, dict) or not str(entry.get("name") or "").strip():
            raise ValueError(f"Coverage row {index} is missing a neighborhood name.")
        rows.append(
            NeighborhoodCoverage(
                name=str(entry["name"]).strip(),
                primary=tuple(str(item) for item in entry.get("primary") or ()),
                extended=tuple(str(item) for item in entry.get("extended") or ()),
            )
        )
    return CoverageTable(rows)


@functools.lru_cache(maxsize=1)
def load_coverage_table(source: Optional[Path] = None) -> CoverageTable:
    """Load the coverage table from ``source`` or the configured file.

    Falls back to the built-in table when no file is configured.
    """

    path = source or settings.coverage_file
    if path is None:
        return DEFAULT_COVERAGE
    if not path.exists():
        raise FileNotFoundError(f"Coverage file not found: {path}")
    with path.open(mode="r", encoding="utf-8") as handle:
        return parse_coverage_rows(json.load(handle))
