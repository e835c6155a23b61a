"""
Random Forest forecaster on lag and rolling-mean features.
"""

from typing import Any, Dict, List, Optional, Sequence
import logging

import numpy as np
import pandas as pd
from sklearn.ensemble import RandomForestRegressor

from retail_forecast.data.structs import ObservationSeries
from retail_forecast.features.engineering import FeatureBuilder, check_lag, check_window
from retail_forecast.models.base_model import BaseForecaster

logger = logging.getLogger(__name__)

DEFAULT_LAGS = [1, 2, 3, 4]
DEFAULT_WINDOWS = [4]


class RandomForestForecaster(BaseForecaster):
    """
    Decision-tree ensemble regressing each value on its recent history.

    Features for the value at t are the configured lags and, per rolling
    window w, the mean of the w values before t. Multi-step forecasts are
    produced recursively, feeding each prediction back as the newest lag.
    """

    def __init__(
        self,
        lags: Optional[Sequence[int]] = None,
        windows: Optional[Sequence[int]] = None,
        feature_config: Optional[Dict[str, Any]] = None,
        model_id: Optional[str] = None,
        hyperparameters: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize Random Forest forecaster.

        Args:
            lags: Lag offsets used as features; defaults to feature_config 'lags'
            windows: Rolling-mean window sizes (each >= 2); defaults to
                feature_config 'rolling_windows'
            feature_config: The `features` config section
            model_id: Unique identifier
            hyperparameters: Passed to sklearn's RandomForestRegressor

        Raises:
            ValueError: If a lag is not a positive integer
            InvalidWindowError: If a window is not an integer >= 2
        """
        super().__init__(model_id, hyperparameters)
        feature_config = feature_config or {}
        if lags is None:
            lags = feature_config.get("lags", DEFAULT_LAGS)
        if windows is None:
            windows = feature_config.get("rolling_windows", DEFAULT_WINDOWS)
        self.lags = sorted({check_lag(lag) for lag in lags})
        self.windows = sorted({check_window(w) for w in windows})
        if not self.lags:
            raise ValueError("At least one lag is required")
        self.feature_config = {"lags": self.lags, "rolling_windows": self.windows}
        self.feature_names: List[str] = []
        self._history: List[float] = []

        # Default params
        self.hyperparameters.setdefault("n_estimators", 100)
        self.hyperparameters.setdefault("random_state", 42)

    @property
    def model_type(self) -> str:
        return "random_forest"

    def _build_training_frame(self, train: ObservationSeries) -> pd.DataFrame:
        frame = FeatureBuilder(self.feature_config).build_frame(train)
        # Rolling means must end at t-1 so the target value is not a feature
        for window in self.windows:
            rolling_col = f"rolling_mean_{window}"
            frame[f"{rolling_col}_prev"] = frame.pop(rolling_col).shift(1)
        return frame.dropna()

    def _fit(self, train: ObservationSeries) -> None:
        frame = self._build_training_frame(train)
        if frame.empty:
            raise ValueError(
                f"Training series of length {len(train)} is too short for "
                f"lags {self.lags} and windows {self.windows}"
            )

        X = frame.drop(columns=["value"])
        y = frame["value"]
        self.feature_names = X.columns.tolist()

        self.model_object = RandomForestRegressor(**self.hyperparameters)
        self.model_object.fit(X.to_numpy(), y.to_numpy())

        # Recursive prediction needs a gap-free history
        self._history = train.to_series().ffill().bfill().tolist()
        logger.debug(f"Random Forest trained on {len(frame)} rows")

    def _feature_vector(self, history: List[float]) -> List[float]:
        lags = [history[-lag] for lag in self.lags]
        return lags + [float(np.mean(history[-w:])) for w in self.windows]

    def _predict(self, horizon: int) -> np.ndarray:
        history = list(self._history)
        predictions = []
        for _ in range(horizon):
            features = np.array([self._feature_vector(history)])
            value = float(self.model_object.predict(features)[0])
            predictions.append(value)
            history.append(value)
        return np.array(predictions)

    def get_feature_importance(self) -> Dict[str, float]:
        """
        Get feature importance scores.

        Returns:
            Dictionary mapping feature names to importance scores
        """
        if not self.is_fitted:
            return {}
        return dict(zip(self.feature_names, self.model_object.feature_importances_.tolist()))
