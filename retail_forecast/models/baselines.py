"""Benchmark forecasters that need no training beyond storing recent values."""

from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from retail_forecast.data.structs import ObservationSeries
from retail_forecast.models.base_model import BaseForecaster


class NaiveForecaster(BaseForecaster):
    """Repeats the last observed value."""

    @property
    def model_type(self) -> str:
        return "naive"

    def _fit(self, train: ObservationSeries) -> None:
        self.model_object = float(self._observed(train)[-1])

    def _predict(self, horizon: int) -> np.ndarray:
        return np.full(horizon, self.model_object)


class SeasonalNaiveForecaster(BaseForecaster):
    """
    Repeats the last full season: the prediction h steps ahead is the value
    observed one season earlier. Weekly retail data uses a 52-week season.
    """

    def __init__(
        self,
        season_length: int = 52,
        model_id: Optional[str] = None,
        hyperparameters: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(model_id, {"season_length": season_length, **(hyperparameters or {})})
        if self.hyperparameters["season_length"] < 1:
            raise ValueError("season_length must be >= 1")

    @property
    def model_type(self) -> str:
        return "seasonal_naive"

    def _fit(self, train: ObservationSeries) -> None:
        season_length = self.hyperparameters["season_length"]
        if len(train) < season_length:
            raise ValueError(
                f"Training series of length {len(train)} is shorter than "
                f"one season ({season_length})"
            )
        # Gaps inside the last season are bridged from neighbouring weeks
        last_season = pd.Series(train.values[-season_length:]).ffill().bfill()
        if last_season.isna().all():
            last_season = last_season.fillna(self._observed(train)[-1])
        self.model_object = last_season.to_numpy(dtype=float)

    def _predict(self, horizon: int) -> np.ndarray:
        return np.resize(self.model_object, horizon)


class MovingAverageForecaster(BaseForecaster):
    """Flat forecast at the mean of the last `window` observed values."""

    def __init__(
        self,
        window: int = 4,
        model_id: Optional[str] = None,
        hyperparameters: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(model_id, {"window": window, **(hyperparameters or {})})
        if self.hyperparameters["window"] < 1:
            raise ValueError("window must be >= 1")

    @property
    def model_type(self) -> str:
        return "moving_average"

    def _fit(self, train: ObservationSeries) -> None:
        observed = self._observed(train)
        self.model_object = float(np.mean(observed[-self.hyperparameters["window"]:]))

    def _predict(self, horizon: int) -> np.ndarray:
        return np.full(horizon, self.model_object)
