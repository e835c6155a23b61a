"""Unit tests for ObservationSeries and Split."""

import pytest
import numpy as np
import pandas as pd

from retail_forecast.data.structs import ObservationSeries
from retail_forecast.utils.error_handling import InvalidSeriesError


class TestObservationSeries:
    """Tests for ObservationSeries construction and invariants."""

    def test_values_are_read_only(self, short_series):
        """Values cannot be modified after construction."""
        with pytest.raises(ValueError):
            short_series.values[0] = 99.0

    def test_input_array_is_copied(self):
        """Mutating the source array does not change the series."""
        source = np.array([1.0, 2.0, 3.0])
        series = ObservationSeries(pd.date_range("2020-01-01", periods=3), source)
        source[0] = 100.0
        assert series.values[0] == 1.0

    def test_duplicate_timestamps_rejected(self):
        """Duplicate timestamps violate the ordering invariant."""
        dates = pd.DatetimeIndex(["2020-01-01", "2020-01-08", "2020-01-08"])
        with pytest.raises(InvalidSeriesError, match="Duplicate"):
            ObservationSeries(dates, [1.0, 2.0, 3.0])

    def test_decreasing_timestamps_rejected(self):
        """Timestamps must be increasing."""
        dates = pd.DatetimeIndex(["2020-01-08", "2020-01-01"])
        with pytest.raises(InvalidSeriesError, match="not increasing"):
            ObservationSeries(dates, [1.0, 2.0])

    def test_length_mismatch_rejected(self):
        """Timestamps and values must have equal length."""
        with pytest.raises(InvalidSeriesError, match="Length mismatch"):
            ObservationSeries(pd.date_range("2020-01-01", periods=3), [1.0, 2.0])

    def test_missing_values_allowed(self, series_with_gaps):
        """Missing values are kept as NaN."""
        assert series_with_gaps.n_missing == 2
        assert np.isnan(series_with_gaps.values[2])

    def test_from_pairs_with_none(self):
        """None in pairs becomes NaN."""
        series = ObservationSeries.from_pairs(
            [(pd.Timestamp("2020-01-01"), 1.0), (pd.Timestamp("2020-01-02"), None)],
            key="s",
        )
        assert len(series) == 2
        assert np.isnan(series.values[1])
        assert series.key == "s"

    def test_from_series_uses_name_as_key(self):
        """pandas Series name becomes the key by default."""
        s = pd.Series([1.0, 2.0], index=pd.date_range("2020-01-01", periods=2), name=("A", 1))
        assert ObservationSeries.from_series(s).key == ("A", 1)

    def test_iteration_yields_pairs(self, short_series):
        """Iterating yields (timestamp, value) pairs in order."""
        pairs = list(short_series)
        assert [v for _, v in pairs] == [10.0, 20.0, 30.0, 40.0, 50.0]
        assert pairs[0][0] == short_series.timestamps[0]

    def test_head_tail_concat_reconstructs(self, short_series):
        """head(n) ++ tail(len-n) equals the original series."""
        rebuilt = short_series.head(2).concat(short_series.tail(3))
        assert rebuilt == short_series

    def test_tail_zero_is_empty(self, short_series):
        """tail(0) is an empty series, not the whole series."""
        assert short_series.tail(0).is_empty

    def test_concat_out_of_order_rejected(self, short_series):
        """Concatenating an earlier series breaks the ordering invariant."""
        with pytest.raises(InvalidSeriesError):
            short_series.tail(2).concat(short_series.head(2))

    def test_equality_treats_nan_as_equal(self, series_with_gaps):
        """Two series with NaN at the same positions compare equal."""
        copy = ObservationSeries(
            series_with_gaps.timestamps, series_with_gaps.values, key=series_with_gaps.key
        )
        assert copy == series_with_gaps

    def test_to_series_is_writable_copy(self, short_series):
        """to_series returns an independent pandas Series."""
        s = short_series.to_series()
        s.iloc[0] = -1.0
        assert short_series.values[0] == 10.0

    def test_empty_series_can_be_constructed(self):
        """An empty series is valid; components reject it later."""
        empty = ObservationSeries(pd.DatetimeIndex([]), [])
        assert empty.is_empty
        assert "n=0" in repr(empty)
