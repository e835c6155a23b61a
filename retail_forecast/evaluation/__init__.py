"""Forecast scoring, backtesting, and model comparison."""

from retail_forecast.evaluation.metrics import ForecastScorer, MetricResult
from retail_forecast.evaluation.backtest import BacktestResult, BacktestRunner
from retail_forecast.evaluation.comparison import ModelComparator

__all__ = [
    "ForecastScorer",
    "MetricResult",
    "BacktestResult",
    "BacktestRunner",
    "ModelComparator",
]
