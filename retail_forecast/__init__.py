"""Retail sales forecast evaluation harness.

Splits ordered sales series into train/validation windows, scores model
forecasts with RMSE, MAE and MAPE, and builds lag / rolling-mean features.
"""

from retail_forecast.data import ObservationSeries, Split, TimeSeriesSplitter
from retail_forecast.evaluation import ForecastScorer, MetricResult
from retail_forecast.features import FeatureBuilder, FeatureRow

__all__ = [
    "ObservationSeries",
    "Split",
    "TimeSeriesSplitter",
    "ForecastScorer",
    "MetricResult",
    "FeatureBuilder",
    "FeatureRow",
]

__version__ = "0.1.0"
