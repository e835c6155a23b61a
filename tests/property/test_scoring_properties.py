"""
Property-based tests for forecast scoring.

For any aligned actual/predicted pair: RMSE >= MAE >= 0, both are zero for a
perfect forecast, both are symmetric in their arguments, and MAPE is either
NaN (no nonzero actuals) or non-negative.
"""

import math

import numpy as np
import pytest
from hypothesis import given, strategies as st, settings

from retail_forecast.evaluation.metrics import ForecastScorer
from retail_forecast.utils.error_handling import AlignmentError

finite = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False)


@st.composite
def aligned_pair(draw, min_size=1, max_size=60):
    n = draw(st.integers(min_value=min_size, max_value=max_size))
    actual = draw(st.lists(finite, min_size=n, max_size=n))
    predicted = draw(st.lists(finite, min_size=n, max_size=n))
    return np.array(actual), np.array(predicted)


@settings(max_examples=100, deadline=None)
@given(pair=aligned_pair())
def test_rmse_bounds_mae(pair):
    actual, predicted = pair
    result = ForecastScorer().score(actual, predicted)
    assert result.mae >= 0
    assert result.rmse >= result.mae - 1e-9 * max(1.0, result.mae)
    assert result.n_points == len(actual)
    assert math.isnan(result.mape) or result.mape >= 0


@settings(max_examples=100, deadline=None)
@given(pair=aligned_pair())
def test_errors_symmetric(pair):
    actual, predicted = pair
    scorer = ForecastScorer()
    forward = scorer.score(actual, predicted)
    backward = scorer.score(predicted, actual)
    assert forward.rmse == pytest.approx(backward.rmse)
    assert forward.mae == pytest.approx(backward.mae)


@settings(max_examples=50, deadline=None)
@given(values=st.lists(finite, min_size=1, max_size=60))
def test_perfect_forecast_scores_zero(values):
    result = ForecastScorer().score(values, values)
    assert result.rmse == 0.0
    assert result.mae == 0.0
    assert math.isnan(result.mape) or result.mape == 0.0


@settings(max_examples=50, deadline=None)
@given(n=st.integers(min_value=1, max_value=30), predicted=st.lists(finite, min_size=1, max_size=30))
def test_all_zero_actuals_mape_undefined(n, predicted):
    predicted = (predicted * n)[:n]
    result = ForecastScorer().score(np.zeros(n), predicted)
    assert math.isnan(result.mape)
    assert not math.isnan(result.mae)


@settings(max_examples=50, deadline=None)
@given(
    actual=st.lists(finite, min_size=1, max_size=30),
    extra=st.integers(min_value=1, max_value=5),
)
def test_length_mismatch_always_rejected(actual, extra):
    with pytest.raises(AlignmentError):
        ForecastScorer().score(actual, actual + [0.0] * extra)
