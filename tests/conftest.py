"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest
import pandas as pd
import numpy as np

from retail_forecast.data.structs import ObservationSeries


def make_weekly_sales(n_weeks: int, seed: int, level: float = 20000.0) -> np.ndarray:
    """Weekly sales with a yearly cycle, a mild trend and noise."""
    rng = np.random.default_rng(seed)
    weeks = np.arange(n_weeks)
    seasonal = 0.15 * level * np.sin(2 * np.pi * weeks / 52)
    trend = 10.0 * weeks
    return level + seasonal + trend + rng.normal(0, 0.02 * level, n_weeks)


@pytest.fixture
def weekly_sales_series():
    """120 weeks of sales for one store/department."""
    dates = pd.date_range(start="2010-02-05", periods=120, freq="W-FRI")
    return ObservationSeries(
        timestamps=dates,
        values=make_weekly_sales(120, seed=42),
        key=(1, 1),
    )


@pytest.fixture
def short_series():
    """The five-point series used in the rolling-mean worked example."""
    dates = pd.date_range(start="2012-01-06", periods=5, freq="W-FRI")
    return ObservationSeries(timestamps=dates, values=[10, 20, 30, 40, 50], key="example")


@pytest.fixture
def series_with_gaps():
    """Twelve weeks with two missing observations."""
    dates = pd.date_range(start="2011-01-07", periods=12, freq="W-FRI")
    values = [100.0, 110.0, np.nan, 130.0, 140.0, 150.0, np.nan, 170.0, 180.0, 190.0, 200.0, 210.0]
    return ObservationSeries(timestamps=dates, values=values, key="gappy")


@pytest.fixture
def sales_frame():
    """
    Long-format sales table: stores 1-2 x depts 1-2 for 80 weeks, plus a
    store 3 department with only 5 weeks of history.
    """
    dates = pd.date_range(start="2010-02-05", periods=80, freq="W-FRI")
    frames = []
    seed = 0
    for store in (1, 2):
        for dept in (1, 2):
            frames.append(pd.DataFrame({
                "Store": store,
                "Dept": dept,
                "Date": dates.strftime("%Y-%m-%d"),
                "Weekly_Sales": make_weekly_sales(80, seed=seed, level=10000.0 * store),
            }))
            seed += 1
    frames.append(pd.DataFrame({
        "Store": 3,
        "Dept": 1,
        "Date": dates[:5].strftime("%Y-%m-%d"),
        "Weekly_Sales": [500.0, 520.0, 510.0, 530.0, 540.0],
    }))
    return pd.concat(frames, ignore_index=True)


@pytest.fixture
def evaluation_config(tmp_path, sales_frame):
    """Evaluation config pointing at a CSV written to a temporary directory."""
    data_path = tmp_path / "weekly_sales.csv"
    sales_frame.to_csv(data_path, index=False)
    return {
        "data": {
            "path": str(data_path),
            "time_column": "Date",
            "value_column": "Weekly_Sales",
            "key_columns": ["Store", "Dept"],
            "aggregation": "sum",
        },
        "evaluation": {
            "horizon": 8,
            "n_folds": 2,
            "skip_invalid": True,
        },
        "models": [
            {"name": "naive"},
            {"name": "moving_average", "params": {"window": 4}},
            {"name": "seasonal_naive", "label": "seasonal_naive_52", "params": {"season_length": 52}},
            {
                "name": "random_forest",
                "params": {"lags": [1, 2, 3], "windows": [4], "hyperparameters": {"n_estimators": 20}},
            },
        ],
        "output": {"dir": str(tmp_path / "outputs")},
    }


@pytest.fixture
def project_config_dir():
    """The repository's config/ directory."""
    return Path(__file__).resolve().parents[1] / "config"
