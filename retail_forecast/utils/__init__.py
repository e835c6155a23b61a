"""Utility functions for configuration, logging, errors, and serialization."""

from retail_forecast.utils.config_manager import ConfigManager
from retail_forecast.utils.error_handling import (
    ForecastEvaluationError,
    InvalidHorizonError,
    AlignmentError,
    EmptySeriesError,
    InvalidSeriesError,
    InvalidWindowError,
    ModelNotFittedError,
)
from retail_forecast.utils.logging_config import setup_logging

__all__ = [
    "ConfigManager",
    "ForecastEvaluationError",
    "InvalidHorizonError",
    "AlignmentError",
    "EmptySeriesError",
    "InvalidSeriesError",
    "InvalidWindowError",
    "ModelNotFittedError",
    "setup_logging",
]
