"""Neighborhood coverage lookup."""

from .resolver import UNKNOWN_NEIGHBORHOOD, extended_coverage, recommend_location, resolve_neighborhood
from .table import DEFAULT_COVERAGE, CoverageTable, NeighborhoodCoverage, load_coverage_table

__all__ = [
    "UNKNOWN_NEIGHBORHOOD",
    "CoverageTable",
    "DEFAULT_COVERAGE",
    "extended_coverage",
    "NeighborhoodCoverage",
    "load_coverage_table",
    "recommend_location",
    "resolve_neighborhood",
]
