"""Backtesting of forecasting models over a collection of sales series."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, Iterable, List, Mapping, Optional
import logging

import pandas as pd

from retail_forecast.data.splitters import TimeSeriesSplitter
from retail_forecast.data.structs import ObservationSeries, Split
from retail_forecast.evaluation.metrics import ForecastScorer, MetricResult
from retail_forecast.models.base_model import BaseForecaster
from retail_forecast.utils.error_handling import (
    EmptySeriesError,
    ForecastEvaluationError,
    InvalidHorizonError,
)

logger = logging.getLogger(__name__)

ModelFactory = Callable[[], BaseForecaster]

RESULT_COLUMNS = ["model", "series_key", "fold", "rmse", "mae", "mape", "n_points"]


@dataclass
class BacktestResult:
    """Metric results for every (series, fold, model) plus the skipped work."""
    results: List[MetricResult] = field(default_factory=list)
    skipped: List[Dict[str, Any]] = field(default_factory=list)

    def to_frame(self) -> pd.DataFrame:
        """One row per MetricResult."""
        return pd.DataFrame([r.to_dict() for r in self.results], columns=RESULT_COLUMNS)

    @property
    def n_series(self) -> int:
        return len({repr(r.series_key) for r in self.results})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_results": len(self.results),
            "n_series": self.n_series,
            "skipped": self.skipped,
        }


class BacktestRunner:
    """
    Splits each series, fits fresh model instances, and scores their forecasts.

    Series are evaluated independently; a model instance is never reused
    across series or folds.
    """

    def __init__(
        self,
        splitter: Optional[TimeSeriesSplitter] = None,
        scorer: Optional[ForecastScorer] = None,
        skip_invalid: bool = True,
    ):
        """
        Args:
            splitter: Splitter to use (default TimeSeriesSplitter())
            scorer: Scorer to use (default ForecastScorer())
            skip_invalid: In evaluate_collection, record and skip series or
                models that cannot be evaluated instead of raising
        """
        self.splitter = splitter or TimeSeriesSplitter()
        self.scorer = scorer or ForecastScorer()
        self.skip_invalid = skip_invalid

    def _splits(
        self,
        series: ObservationSeries,
        horizon: int,
        n_folds: int,
        step: Optional[int],
    ) -> List[Split]:
        if n_folds == 1:
            return [self.splitter.split(series, horizon)]
        return list(self.splitter.walk_forward_splits(series, horizon, n_folds, step))

    def _run_model(self, split: Split, label: str, factory: ModelFactory) -> MetricResult:
        model = factory()
        predicted = model.forecast(split)
        result = self.scorer.score_split(split, predicted, model=label)
        result.metadata["model_params"] = model.get_params()
        return result

    def evaluate_series(
        self,
        series: ObservationSeries,
        models: Mapping[str, ModelFactory],
        horizon: int,
        n_folds: int = 1,
        step: Optional[int] = None,
    ) -> List[MetricResult]:
        """
        Evaluate every model on one series. Errors propagate.

        Args:
            series: Series to evaluate
            models: Mapping of model label to a factory returning a new model
            horizon: Observations held out per fold
            n_folds: Walk-forward folds (1 means a single split)
            step: Origin advance between folds (defaults to horizon)

        Returns:
            One MetricResult per (fold, model)
        """
        return [
            self._run_model(split, label, factory)
            for split in self._splits(series, horizon, n_folds, step)
            for label, factory in models.items()
        ]

    def evaluate_collection(
        self,
        collection: Iterable[ObservationSeries],
        models: Mapping[str, ModelFactory],
        horizon: int,
        n_folds: int = 1,
        step: Optional[int] = None,
    ) -> BacktestResult:
        """
        Evaluate every model on every series and concatenate the results.

        Returns:
            BacktestResult with all metric results and any skipped work
        """
        outcome = BacktestResult()

        for series in collection:
            try:
                splits = self._splits(series, horizon, n_folds, step)
            except (InvalidHorizonError, EmptySeriesError) as e:
                self._skip(outcome, series.key, None, e)
                continue

            for split in splits:
                for label, factory in models.items():
                    try:
                        outcome.results.append(self._run_model(split, label, factory))
                    except (ForecastEvaluationError, ValueError) as e:
                        self._skip(outcome, series.key, label, e)

        logger.info(
            f"Backtest finished: {len(outcome.results)} results, "
            f"{len(outcome.skipped)} skipped",
            extra={"props": {
                "horizon": horizon,
                "n_folds": n_folds,
                "n_results": len(outcome.results),
                "n_skipped": len(outcome.skipped),
            }},
        )
        return outcome

    def _skip(
        self,
        outcome: BacktestResult,
        key: Optional[Hashable],
        model: Optional[str],
        error: Exception,
    ) -> None:
        if not self.skip_invalid:
            raise error
        logger.warning(
            f"Skipping series {key!r}" + (f" for model {model}" if model else "") + f": {error}"
        )
        outcome.skipped.append({
            "series_key": key,
            "model": model,
            "error_type": type(error).__name__,
            "reason": str(error),
        })
