"""Core data structures for the evaluation harness."""

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterable, Iterator, Optional, Tuple
import numpy as np
import pandas as pd

from retail_forecast.utils.error_handling import InvalidSeriesError


@dataclass(frozen=True, eq=False)
class ObservationSeries:
    """
    Immutable, strictly time-ordered sequence of (timestamp, value) pairs.

    One series exists per entity (e.g. a store x department pair). Values are
    stored as floats; missing observations are NaN and are never filled in here.

    Attributes:
        timestamps: Strictly increasing index of observation times
        values: Read-only float array, same length as timestamps
        key: Optional identifier of the entity the series belongs to
    """
    timestamps: pd.Index
    values: np.ndarray
    key: Optional[Hashable] = None

    def __post_init__(self):
        """Copy inputs, validate ordering and freeze the values array."""
        timestamps = pd.Index(self.timestamps)
        values = np.array(self.values, dtype=float)

        if values.ndim != 1:
            raise InvalidSeriesError(f"Values must be one-dimensional, got shape {values.shape}")
        if len(timestamps) != len(values):
            raise InvalidSeriesError(
                f"Length mismatch: timestamps ({len(timestamps)}) vs values ({len(values)})"
            )
        if timestamps.has_duplicates:
            dupes = timestamps[timestamps.duplicated()].unique().tolist()
            raise InvalidSeriesError(f"Duplicate timestamps in series {self.key!r}: {dupes[:5]}")
        if not timestamps.is_monotonic_increasing:
            raise InvalidSeriesError(f"Timestamps of series {self.key!r} are not increasing")

        values.setflags(write=False)
        object.__setattr__(self, "timestamps", timestamps)
        object.__setattr__(self, "values", values)

    @classmethod
    def from_series(cls, series: pd.Series, key: Optional[Hashable] = None) -> "ObservationSeries":
        """Create from a pandas Series indexed by timestamp. Key defaults to the series name."""
        return cls(
            timestamps=series.index,
            values=series.to_numpy(dtype=float, na_value=np.nan),
            key=key if key is not None else series.name,
        )

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[Tuple[Any, Optional[float]]],
        key: Optional[Hashable] = None,
    ) -> "ObservationSeries":
        """Create from an iterable of (timestamp, value) pairs."""
        pairs = list(pairs)
        timestamps = [ts for ts, _ in pairs]
        values = [np.nan if v is None else v for _, v in pairs]
        return cls(timestamps=pd.Index(timestamps), values=np.array(values, dtype=float), key=key)

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Tuple[Any, float]]:
        return zip(self.timestamps, self.values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ObservationSeries):
            return NotImplemented
        return (
            self.key == other.key
            and self.timestamps.equals(other.timestamps)
            and np.array_equal(self.values, other.values, equal_nan=True)
        )

    def __repr__(self) -> str:
        if self.is_empty:
            return f"ObservationSeries(key={self.key!r}, n=0)"
        return (
            f"ObservationSeries(key={self.key!r}, n={len(self)}, "
            f"start={self.timestamps[0]}, end={self.timestamps[-1]})"
        )

    @property
    def is_empty(self) -> bool:
        return len(self.values) == 0

    @property
    def n_missing(self) -> int:
        return int(np.isnan(self.values).sum())

    def slice(self, start: int, stop: int) -> "ObservationSeries":
        """Positional slice [start, stop), keeping the key."""
        return ObservationSeries(
            timestamps=self.timestamps[start:stop],
            values=self.values[start:stop],
            key=self.key,
        )

    def head(self, n: int) -> "ObservationSeries":
        """First n observations."""
        return self.slice(0, max(n, 0))

    def tail(self, n: int) -> "ObservationSeries":
        """Last n observations."""
        return self.slice(max(len(self) - n, 0), len(self))

    def concat(self, other: "ObservationSeries") -> "ObservationSeries":
        """Append a series whose timestamps all follow this one's."""
        return ObservationSeries(
            timestamps=self.timestamps.append(other.timestamps),
            values=np.concatenate([self.values, other.values]),
            key=self.key,
        )

    def to_series(self) -> pd.Series:
        """Return a writable pandas copy."""
        return pd.Series(self.values.copy(), index=self.timestamps.copy(), name="value")


@dataclass(frozen=True)
class Split:
    """
    Train/validation partition of one ObservationSeries.

    Attributes:
        train: Chronological prefix used for fitting (never empty)
        validation: Trailing `horizon` observations held out for scoring
        horizon: Number of held-out observations
        metadata: Split details (sizes, boundary timestamps, fold number)
    """
    train: ObservationSeries
    validation: ObservationSeries
    horizon: int
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def split_point(self) -> int:
        """Position of the first validation observation in the source series."""
        return len(self.train)

    @property
    def key(self) -> Optional[Hashable]:
        return self.train.key

    def reconstruct(self) -> ObservationSeries:
        """Concatenate train and validation back into the source series."""
        return self.train.concat(self.validation)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization (values excluded)."""
        return {
            "key": self.key,
            "horizon": self.horizon,
            "split_point": self.split_point,
            "train_size": len(self.train),
            "validation_size": len(self.validation),
            "metadata": self.metadata,
        }
