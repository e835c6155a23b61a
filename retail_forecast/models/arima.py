"""ARIMA forecaster backed by statsmodels' SARIMAX."""

from typing import Any, Dict, Optional, Sequence, Tuple
import logging

import numpy as np
from statsmodels.tsa.statespace.sarimax import SARIMAX

from retail_forecast.data.structs import ObservationSeries
from retail_forecast.models.base_model import BaseForecaster

logger = logging.getLogger(__name__)


class ARIMAForecaster(BaseForecaster):
    """
    Seasonal ARIMA model. Missing observations are handled by the state-space
    Kalman filter, so gaps need no imputation.
    """

    def __init__(
        self,
        order: Sequence[int] = (1, 1, 1),
        seasonal_order: Sequence[int] = (0, 0, 0, 0),
        model_id: Optional[str] = None,
        hyperparameters: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize ARIMA forecaster.

        Args:
            order: (p, d, q) order
            seasonal_order: (P, D, Q, s) seasonal order
            model_id: Unique identifier
            hyperparameters: Extra keyword arguments for SARIMAX
        """
        super().__init__(model_id, hyperparameters)
        self.order: Tuple[int, ...] = tuple(order)
        self.seasonal_order: Tuple[int, ...] = tuple(seasonal_order)
        if len(self.order) != 3 or len(self.seasonal_order) != 4:
            raise ValueError("order must have 3 terms and seasonal_order 4 terms")
        self.hyperparameters.setdefault("enforce_stationarity", False)
        self.hyperparameters.setdefault("enforce_invertibility", False)

    @property
    def model_type(self) -> str:
        return "arima"

    def _fit(self, train: ObservationSeries) -> None:
        model = SARIMAX(
            np.asarray(train.values, dtype=float),
            order=self.order,
            seasonal_order=self.seasonal_order,
            **self.hyperparameters,
        )
        self.model_object = model.fit(disp=False)
        logger.debug(f"ARIMA{self.order}x{self.seasonal_order} AIC={self.model_object.aic:.2f}")

    def _predict(self, horizon: int) -> np.ndarray:
        return np.asarray(self.model_object.forecast(steps=horizon), dtype=float)

    def get_params(self) -> Dict[str, Any]:
        params = super().get_params()
        params.update({"order": list(self.order), "seasonal_order": list(self.seasonal_order)})
        return params
