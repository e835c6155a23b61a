"""Observation series, loading, and splitting utilities."""

from .structs import ObservationSeries, Split
from .loaders import DataLoader, ValidationResult
from .splitters import TimeSeriesSplitter

__all__ = [
    "ObservationSeries",
    "Split",
    "DataLoader",
    "ValidationResult",
    "TimeSeriesSplitter",
]
