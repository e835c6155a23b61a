"""Forecasting model implementations and the name-based model registry."""

from typing import Any, Callable, Dict

from retail_forecast.models.base_model import BaseForecaster
from retail_forecast.models.baselines import (
    NaiveForecaster,
    SeasonalNaiveForecaster,
    MovingAverageForecaster,
)
from retail_forecast.models.random_forest import RandomForestForecaster
from retail_forecast.models.arima import ARIMAForecaster

MODEL_REGISTRY: Dict[str, Callable[..., BaseForecaster]] = {
    "naive": NaiveForecaster,
    "seasonal_naive": SeasonalNaiveForecaster,
    "moving_average": MovingAverageForecaster,
    "random_forest": RandomForestForecaster,
    "arima": ARIMAForecaster,
}

# Models that take the `features` config section as `feature_config`
FEATURE_MODELS = {"random_forest"}


def create_model(name: str, **params: Any) -> BaseForecaster:
    """Instantiate a registered model by its configuration name."""
    if name not in MODEL_REGISTRY:
        raise ValueError(f"Unknown model: {name}. Available: {sorted(MODEL_REGISTRY)}")
    return MODEL_REGISTRY[name](**params)


__all__ = [
    "BaseForecaster",
    "NaiveForecaster",
    "SeasonalNaiveForecaster",
    "MovingAverageForecaster",
    "RandomForestForecaster",
    "ARIMAForecaster",
    "MODEL_REGISTRY",
    "FEATURE_MODELS",
    "create_model",
]
