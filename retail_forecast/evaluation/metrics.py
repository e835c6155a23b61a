"""Forecast accuracy metrics."""

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Optional, Tuple
import logging

import numpy as np
import pandas as pd

from retail_forecast.data.structs import ObservationSeries, Split
from retail_forecast.utils.error_handling import AlignmentError, EmptySeriesError

logger = logging.getLogger(__name__)

METRIC_NAMES = ("rmse", "mae", "mape")


@dataclass
class MetricResult:
    """
    Forecast accuracy scores for one model on one held-out window.

    All three metrics are computed over the same set of positions: those where
    both actual and predicted values are present. MAPE is a fraction (0.05 is
    5%) and is NaN when every scored actual is zero.
    """
    model: str
    rmse: float
    mae: float
    mape: float
    n_points: int
    series_key: Optional[Hashable] = None
    fold: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def metrics(self) -> Dict[str, float]:
        return {"rmse": self.rmse, "mae": self.mae, "mape": self.mape}

    def to_dict(self) -> Dict[str, Any]:
        """Flatten to a single record for comparison tables."""
        return {
            "model": self.model,
            "series_key": self.series_key,
            "fold": self.fold,
            "rmse": self.rmse,
            "mae": self.mae,
            "mape": self.mape,
            "n_points": self.n_points,
        }


def _as_array(values: Any) -> Tuple[np.ndarray, Optional[pd.Index]]:
    """Return (float array, index or None) for any supported sequence."""
    if isinstance(values, ObservationSeries):
        return np.asarray(values.values, dtype=float), values.timestamps
    if isinstance(values, pd.Series):
        return values.to_numpy(dtype=float, na_value=np.nan), values.index
    array = np.asarray(values, dtype=float)
    if array.ndim != 1:
        raise AlignmentError(f"Expected a one-dimensional sequence, got shape {array.shape}")
    return array, None


class ForecastScorer:
    """Scores predicted values against held-out actuals with RMSE, MAE and MAPE."""

    def score(
        self,
        actual: Any,
        predicted: Any,
        model: str = "model",
        series_key: Optional[Hashable] = None,
        fold: Optional[int] = None,
    ) -> MetricResult:
        """
        Calculate forecast accuracy metrics.

        Args:
            actual: Observed values (sequence, array, pandas Series or ObservationSeries)
            predicted: Predicted values aligned position-by-position with actual
            model: Label identifying the model in comparison tables
            series_key: Optional key of the scored series
            fold: Optional walk-forward fold number

        Returns:
            MetricResult with RMSE, MAE, MAPE and the number of scored points

        Raises:
            AlignmentError: If lengths differ, or both inputs carry differing indices
            EmptySeriesError: If the inputs are empty
        """
        y_true, true_index = _as_array(actual)
        y_pred, pred_index = _as_array(predicted)

        if len(y_true) != len(y_pred):
            raise AlignmentError(
                f"Length mismatch: actual ({len(y_true)}) vs predicted ({len(y_pred)})"
            )
        if true_index is not None and pred_index is not None and not true_index.equals(pred_index):
            raise AlignmentError("Actual and predicted are indexed by different timestamps")
        if len(y_true) == 0:
            raise EmptySeriesError("Cannot score empty sequences")

        if isinstance(actual, ObservationSeries) and series_key is None:
            series_key = actual.key

        # Same index set for every metric
        mask = ~(np.isnan(y_true) | np.isnan(y_pred))
        y_true = y_true[mask]
        y_pred = y_pred[mask]
        n_points = int(mask.sum())

        if n_points == 0:
            logger.warning(f"No overlapping observations to score for {model} on {series_key!r}")
            rmse = mae = mape = np.nan
        else:
            errors = y_true - y_pred
            # Infinite predictions give infinite scores
            rmse = float(np.sqrt(np.mean(errors ** 2)))
            mae = float(np.mean(np.abs(errors)))

            # MAPE is undefined where the actual is zero
            nonzero = y_true != 0
            if nonzero.any():
                mape = float(np.mean(np.abs(
                    (y_true[nonzero] - y_pred[nonzero]) / y_true[nonzero]
                )))
            else:
                mape = np.nan

        result = MetricResult(
            model=model,
            rmse=rmse,
            mae=mae,
            mape=mape,
            n_points=n_points,
            series_key=series_key,
            fold=fold,
        )
        logger.debug(
            f"Scored {model} on {series_key!r}",
            extra={"props": result.to_dict()},
        )
        return result

    def score_split(self, split: Split, predicted: Any, model: str = "model") -> MetricResult:
        """Score predictions against a split's validation window."""
        result = self.score(
            split.validation,
            predicted,
            model=model,
            series_key=split.key,
            fold=split.metadata.get("fold"),
        )
        result.metadata.update({"horizon": split.horizon, "split_point": split.split_point})
        return result
