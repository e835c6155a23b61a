"""Base interface for all forecasting models."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional
import logging
import numbers
import time

import numpy as np
import pandas as pd

from retail_forecast.data.structs import ObservationSeries, Split
from retail_forecast.utils.error_handling import (
    EmptySeriesError,
    InvalidHorizonError,
    ModelNotFittedError,
)

logger = logging.getLogger(__name__)


class BaseForecaster(ABC):
    """
    Abstract base class for univariate forecasting models.

    A forecaster is fitted on a training series and predicts the next
    `horizon` values. The harness treats every model as a black box behind
    `fit` / `predict`, so models are interchangeable in comparisons.
    """

    def __init__(
        self,
        model_id: Optional[str] = None,
        hyperparameters: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize base model.

        Args:
            model_id: Unique identifier for the model
            hyperparameters: Model hyperparameters
        """
        self.hyperparameters = dict(hyperparameters or {})
        self.model_id = model_id or self._generate_model_id()
        self.model_object: Any = None
        self.is_fitted: bool = False
        self.training_time: float = 0.0
        self.n_train: int = 0

    @property
    @abstractmethod
    def model_type(self) -> str:
        """Return the model type identifier."""

    @abstractmethod
    def _fit(self, train: ObservationSeries) -> None:
        """Fit model state on a non-empty training series."""

    @abstractmethod
    def _predict(self, horizon: int) -> np.ndarray:
        """Predict the next `horizon` values after the training series."""

    def fit(self, train: ObservationSeries) -> "BaseForecaster":
        """
        Fit the model to a training series.

        Args:
            train: Chronologically ordered training observations

        Returns:
            Self for method chaining
        """
        if len(train) == 0:
            raise EmptySeriesError(f"Cannot fit {self.model_type} on an empty series")
        if train.n_missing == len(train):
            raise EmptySeriesError(
                f"Cannot fit {self.model_type}: series {train.key!r} has no observed values"
            )

        start = time.perf_counter()
        self._fit(train)
        self.training_time = time.perf_counter() - start
        self.n_train = len(train)
        self.is_fitted = True

        logger.debug(
            f"Fitted {self.model_type} on {len(train)} observations "
            f"in {self.training_time:.3f}s"
        )
        return self

    def predict(self, horizon: int) -> np.ndarray:
        """
        Generate predictions for the next `horizon` periods.

        Args:
            horizon: Number of periods to predict

        Returns:
            Array of predictions with length `horizon`
        """
        if not self.is_fitted:
            raise ModelNotFittedError(f"{self.model_type} must be fitted before predicting")
        if isinstance(horizon, bool) or not isinstance(horizon, numbers.Integral) or horizon <= 0:
            raise InvalidHorizonError(f"Horizon must be a positive integer, got {horizon!r}")

        predictions = np.asarray(self._predict(int(horizon)), dtype=float)
        if predictions.shape != (horizon,):
            raise RuntimeError(
                f"{self.model_type} returned shape {predictions.shape}, expected ({horizon},)"
            )
        return predictions

    def forecast(self, split: Split) -> pd.Series:
        """
        Fit on the split's train and predict its validation window.

        Returns:
            Predictions indexed by the validation timestamps
        """
        self.fit(split.train)
        predictions = self.predict(split.horizon)
        return pd.Series(predictions, index=split.validation.timestamps, name=self.model_type)

    def get_params(self) -> Dict[str, Any]:
        """Return identifying parameters for reporting."""
        return {
            "model_id": self.model_id,
            "model_type": self.model_type,
            "hyperparameters": self.hyperparameters,
        }

    def _generate_model_id(self) -> str:
        """Generate a unique model ID."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return f"{self.model_type}_{timestamp}"

    @staticmethod
    def _observed(train: ObservationSeries) -> np.ndarray:
        """Training values with missing observations removed."""
        values = np.asarray(train.values)
        return values[~np.isnan(values)]

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"model_id='{self.model_id}', "
            f"is_fitted={self.is_fitted})"
        )
