"""Model comparison tables built from computed metric results."""

import logging
from typing import List, Sequence, Union

import pandas as pd

from retail_forecast.evaluation.backtest import BacktestResult, RESULT_COLUMNS
from retail_forecast.evaluation.metrics import METRIC_NAMES, MetricResult

logger = logging.getLogger(__name__)

Results = Union[BacktestResult, Sequence[MetricResult]]


class ModelComparator:
    """
    Aggregates MetricResult records into per-model comparison tables.
    """

    def _frame(self, results: Results) -> pd.DataFrame:
        if isinstance(results, BacktestResult):
            return results.to_frame()
        return pd.DataFrame([r.to_dict() for r in results], columns=RESULT_COLUMNS)

    def summarize(self, results: Results) -> pd.DataFrame:
        """
        Compare models across all scored series and folds.

        Args:
            results: BacktestResult or list of MetricResult

        Returns:
            DataFrame with models as rows and mean RMSE, MAE, MAPE (missing
            values skipped), total scored points, series and result counts,
            ordered by mean RMSE
        """
        df = self._frame(results)
        if df.empty:
            return pd.DataFrame(columns=[*METRIC_NAMES, "n_points", "n_series", "n_results"])

        df["series_id"] = df["series_key"].map(repr)
        grouped = df.groupby("model", sort=False)
        summary = grouped[list(METRIC_NAMES)].mean()
        summary["n_points"] = grouped["n_points"].sum()
        summary["n_series"] = grouped["series_id"].nunique()
        summary["n_results"] = grouped.size()

        return summary.sort_values("rmse", na_position="last", kind="stable")

    def rank(self, results: Results, metric: str = "rmse") -> List[str]:
        """Model labels ordered best (lowest mean metric) first."""
        if metric not in METRIC_NAMES:
            raise ValueError(f"Unknown metric: {metric}. Supported: {list(METRIC_NAMES)}")
        summary = self.summarize(results)
        return summary.sort_values(metric, na_position="last", kind="stable").index.tolist()

    def best_model(self, results: Results, metric: str = "rmse") -> str:
        """Label of the model with the lowest mean metric."""
        ranking = self.rank(results, metric)
        if not ranking:
            raise ValueError("No results to compare")
        logger.info(f"Best model by {metric}: {ranking[0]}")
        return ranking[0]
