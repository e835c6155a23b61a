"""Time series train/validation splitting utilities."""

from typing import Any, Dict, Iterator, List, Optional, Tuple
import numbers
import logging

from retail_forecast.data.structs import ObservationSeries, Split
from retail_forecast.utils.error_handling import EmptySeriesError, InvalidHorizonError

logger = logging.getLogger(__name__)


def _check_horizon(horizon: Any) -> int:
    """Reject non-integer and non-positive horizons."""
    if isinstance(horizon, bool) or not isinstance(horizon, numbers.Integral):
        raise InvalidHorizonError(f"Horizon must be an integer, got {horizon!r}")
    if horizon <= 0:
        raise InvalidHorizonError(f"Horizon must be positive, got {horizon}")
    return int(horizon)


def _check_count(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}")
    return int(value)


class TimeSeriesSplitter:
    """
    Horizon-based train/validation splitting.

    The split point is always positional: `len(series) - horizon`. No ratio or
    date is recomputed per call, so walk-forward refits stay consistent.
    """

    def split(self, series: ObservationSeries, horizon: int) -> Split:
        """
        Hold out the last `horizon` observations for validation.

        Args:
            series: Chronologically ordered series
            horizon: Number of trailing observations to hold out

        Returns:
            Split whose train is every observation before the held-out suffix

        Raises:
            EmptySeriesError: If the series has no observations
            InvalidHorizonError: If horizon <= 0 or horizon >= len(series)
        """
        n = len(series)
        if n == 0:
            raise EmptySeriesError(f"Cannot split empty series {series.key!r}")

        horizon = _check_horizon(horizon)
        if horizon >= n:
            raise InvalidHorizonError(
                f"Horizon ({horizon}) must be smaller than series length ({n}) "
                f"for series {series.key!r}"
            )

        split_point = n - horizon
        train = series.slice(0, split_point)
        validation = series.slice(split_point, n)

        metadata: Dict[str, Any] = {
            "split_type": "horizon",
            "total_samples": n,
            "train_samples": len(train),
            "validation_samples": len(validation),
            "train_start": str(train.timestamps[0]),
            "train_end": str(train.timestamps[-1]),
            "validation_start": str(validation.timestamps[0]),
            "validation_end": str(validation.timestamps[-1]),
        }

        return Split(train=train, validation=validation, horizon=horizon, metadata=metadata)

    def walk_forward_splits(
        self,
        series: ObservationSeries,
        horizon: int,
        n_folds: int,
        step: Optional[int] = None,
    ) -> Iterator[Split]:
        """
        Generate expanding-origin splits for walk-forward evaluation.

        Fold i (oldest first) truncates the series to its first
        `len(series) - (n_folds - 1 - i) * step` observations and applies
        `split` to that prefix. The last fold equals `split(series, horizon)`.

        Args:
            series: Chronologically ordered series
            horizon: Observations held out in every fold
            n_folds: Number of folds
            step: Observations the origin advances between folds (defaults to horizon)

        Returns:
            Iterator of Split, one per fold, with `fold` recorded in its metadata

        Raises:
            EmptySeriesError: If the series has no observations
            InvalidHorizonError: If the earliest fold would have an empty train
            ValueError: If n_folds or step is not a positive integer
        """
        n = len(series)
        if n == 0:
            raise EmptySeriesError(f"Cannot split empty series {series.key!r}")

        horizon = _check_horizon(horizon)
        n_folds = _check_count(n_folds, "n_folds")
        step = horizon if step is None else _check_count(step, "step")

        earliest_length = n - (n_folds - 1) * step
        if earliest_length - horizon <= 0:
            raise InvalidHorizonError(
                f"Series {series.key!r} of length {n} is too short for {n_folds} folds "
                f"with horizon {horizon} and step {step}"
            )

        return self._iter_folds(series, horizon, n_folds, step)

    def _iter_folds(
        self,
        series: ObservationSeries,
        horizon: int,
        n_folds: int,
        step: int,
    ) -> Iterator[Split]:
        n = len(series)
        for fold in range(n_folds):
            prefix_length = n - (n_folds - 1 - fold) * step
            split = self.split(series.head(prefix_length), horizon)
            split.metadata.update({
                "split_type": "walk_forward",
                "fold": fold,
                "n_folds": n_folds,
                "step": step,
            })
            yield split

    def validate_no_leakage(self, split: Split) -> Tuple[bool, List[str]]:
        """
        Validate that a split has no temporal data leakage.

        Args:
            split: Split to validate

        Returns:
            Tuple of (is_valid, list of issues)
        """
        issues: List[str] = []

        train_times = split.train.timestamps
        val_times = split.validation.timestamps

        if len(train_times) == 0:
            issues.append("Training set is empty")
        if len(val_times) != split.horizon:
            issues.append(
                f"Validation size ({len(val_times)}) differs from horizon ({split.horizon})"
            )

        if len(train_times) > 0 and len(val_times) > 0:
            if train_times.max() >= val_times.min():
                issues.append(
                    f"Training data ({train_times.max()}) overlaps with "
                    f"validation data ({val_times.min()})"
                )

        if issues:
            logger.warning(f"Leakage check failed for series {split.key!r}: {issues}")

        return len(issues) == 0, issues
