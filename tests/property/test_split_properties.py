"""
Property-based tests for horizon splitting.

For any series of length N and any horizon 0 < H < N, the split is a
partition: train has N - H points, validation has H, every train timestamp
precedes every validation timestamp, and train ++ validation is the input.
"""

import numpy as np
import pandas as pd
import pytest
from hypothesis import given, strategies as st, settings

from retail_forecast.data.splitters import TimeSeriesSplitter
from retail_forecast.data.structs import ObservationSeries
from retail_forecast.utils.error_handling import InvalidHorizonError


@st.composite
def series_and_horizon(draw, min_len=2, max_len=150):
    """A weekly series with optional gaps and a valid horizon for it."""
    n = draw(st.integers(min_value=min_len, max_value=max_len))
    values = draw(st.lists(
        st.one_of(
            st.floats(min_value=0.0, max_value=1e6, allow_nan=False),
            st.just(np.nan),
        ),
        min_size=n,
        max_size=n,
    ))
    dates = pd.date_range("2010-02-05", periods=n, freq="W-FRI")
    horizon = draw(st.integers(min_value=1, max_value=n - 1))
    return ObservationSeries(dates, values, key="prop"), horizon


@settings(max_examples=100, deadline=None)
@given(case=series_and_horizon())
def test_split_is_a_chronological_partition(case):
    series, horizon = case
    split = TimeSeriesSplitter().split(series, horizon)

    assert len(split.train) == len(series) - horizon
    assert len(split.validation) == horizon
    assert split.train.timestamps.max() < split.validation.timestamps.min()
    assert split.reconstruct() == series


@settings(max_examples=50, deadline=None)
@given(case=series_and_horizon(), extra=st.integers(min_value=0, max_value=10))
def test_horizon_at_or_beyond_length_rejected(case, extra):
    series, _ = case
    with pytest.raises(InvalidHorizonError):
        TimeSeriesSplitter().split(series, len(series) + extra)


@settings(max_examples=50, deadline=None)
@given(
    case=series_and_horizon(min_len=20),
    n_folds=st.integers(min_value=1, max_value=4),
    step=st.integers(min_value=1, max_value=5),
)
def test_walk_forward_origins_advance(case, n_folds, step):
    series, horizon = case
    earliest_train = len(series) - (n_folds - 1) * step - horizon
    if earliest_train <= 0:
        with pytest.raises(InvalidHorizonError):
            TimeSeriesSplitter().walk_forward_splits(series, horizon, n_folds, step)
        return

    splits = list(TimeSeriesSplitter().walk_forward_splits(series, horizon, n_folds, step))
    assert len(splits) == n_folds
    assert np.all(np.diff([s.split_point for s in splits]) == step)
    for split in splits:
        assert len(split.validation) == horizon
        assert split.train.timestamps[-1] < split.validation.timestamps[0]
    assert splits[-1].split_point == len(series) - horizon
