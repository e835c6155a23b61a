"""Lag and rolling-window features for a single ordered sales series.

`FeatureBuilder.build` yields one `FeatureRow` per observation, lazily and in
input order. `FeatureBuilder.build_frame` is the vectorised pandas equivalent
used by the regression models, with any number of lags and windows.
"""

from collections import deque
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Sequence
import numbers
import logging

import numpy as np
import pandas as pd

from retail_forecast.data.structs import ObservationSeries
from retail_forecast.utils.error_handling import EmptySeriesError, InvalidWindowError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureRow:
    """Features aligned to one observation. Undefined features are NaN."""
    timestamp: Any
    value: float
    lag_1: float
    rolling_mean: float


def check_window(window: Any) -> int:
    if isinstance(window, bool) or not isinstance(window, numbers.Integral) or window < 2:
        raise InvalidWindowError(f"Window must be an integer >= 2, got {window!r}")
    return int(window)


def check_lag(lag: Any) -> int:
    if isinstance(lag, bool) or not isinstance(lag, numbers.Integral) or lag < 1:
        raise ValueError(f"Lag must be a positive integer, got {lag!r}")
    return int(lag)


class FeatureSequence:
    """
    Finite, restartable sequence of FeatureRow aligned 1:1 with a series.

    Rows are computed on iteration; iterating twice gives identical rows.
    """

    def __init__(self, series: ObservationSeries, window: int):
        self.series = series
        self.window = window

    def __len__(self) -> int:
        return len(self.series)

    def __iter__(self) -> Iterator[FeatureRow]:
        buffer: deque = deque(maxlen=self.window)
        previous = np.nan
        for timestamp, value in self.series:
            buffer.append(value)
            if len(buffer) == self.window and not np.isnan(buffer).any():
                rolling = float(sum(buffer) / self.window)
            else:
                rolling = np.nan
            yield FeatureRow(
                timestamp=timestamp,
                value=float(value),
                lag_1=float(previous),
                rolling_mean=rolling,
            )
            previous = value

    def to_frame(self) -> pd.DataFrame:
        """Materialise the rows as a DataFrame indexed by timestamp."""
        rows = list(self)
        return pd.DataFrame(
            {
                "value": [r.value for r in rows],
                "lag_1": [r.lag_1 for r in rows],
                f"rolling_mean_{self.window}": [r.rolling_mean for r in rows],
            },
            index=self.series.timestamps,
        )


class FeatureBuilder:
    """Handles feature construction for observation series."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize FeatureBuilder with optional configuration."""
        self.config = config or {}

    def build(self, series: ObservationSeries, window: Optional[int] = None) -> FeatureSequence:
        """
        Derive lag-1 and trailing rolling-mean features.

        The rolling mean at position i covers values [i-k+1 .. i]. It is NaN
        while fewer than k values are available, or when the window holds a
        missing value. The lag at position 0 is NaN.

        Args:
            series: Ordered observation series
            window: Rolling window size k (>= 2); defaults to config 'rolling_window'

        Returns:
            Lazy FeatureSequence aligned with the input

        Raises:
            EmptySeriesError: If the series has no observations
            InvalidWindowError: If window is not an integer >= 2
        """
        if window is None:
            window = self.config.get("rolling_window", 4)
        window = check_window(window)
        if len(series) == 0:
            raise EmptySeriesError(f"Cannot build features for empty series {series.key!r}")
        return FeatureSequence(series, window)

    def build_frame(
        self,
        series: ObservationSeries,
        lags: Optional[Sequence[int]] = None,
        windows: Optional[Sequence[int]] = None,
    ) -> pd.DataFrame:
        """
        Vectorised lag and rolling-mean features.

        Args:
            series: Ordered observation series
            lags: Lag periods (defaults to config 'lags' or [1])
            windows: Rolling window sizes (defaults to config 'rolling_windows' or [4])

        Returns:
            DataFrame indexed by timestamp with 'value', 'lag_{n}' and
            'rolling_mean_{k}' columns
        """
        if len(series) == 0:
            raise EmptySeriesError(f"Cannot build features for empty series {series.key!r}")

        lags = [
            check_lag(lag)
            for lag in (lags if lags is not None else self.config.get("lags", [1]))
        ]
        windows = [
            check_window(w)
            for w in (windows if windows is not None else self.config.get("rolling_windows", [4]))
        ]

        values = series.to_series()
        result = pd.DataFrame({"value": values})

        for lag in lags:
            result[f"lag_{lag}"] = values.shift(lag)

        for window in windows:
            result[f"rolling_mean_{window}"] = values.rolling(window=window, min_periods=window).mean()

        logger.debug(
            f"Created {len(lags)} lag and {len(windows)} rolling features "
            f"for series {series.key!r}"
        )
        return result
