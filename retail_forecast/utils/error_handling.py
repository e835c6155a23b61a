"""Error types raised by the evaluation harness."""


class ForecastEvaluationError(Exception):
    """Base class for all harness errors."""


class InvalidHorizonError(ForecastEvaluationError, ValueError):
    """Raised when a split horizon is not in the range 0 < H < len(series)."""


class AlignmentError(ForecastEvaluationError, ValueError):
    """Raised when actual and predicted sequences do not line up."""


class EmptySeriesError(ForecastEvaluationError, ValueError):
    """Raised when a component receives a zero-length series."""


class InvalidSeriesError(ForecastEvaluationError, ValueError):
    """Raised when a series violates its ordering or length invariants."""


class InvalidWindowError(ForecastEvaluationError, ValueError):
    """Raised when a rolling window size is not an integer >= 2."""


class ModelNotFittedError(ForecastEvaluationError, RuntimeError):
    """Raised when predict is called on an unfitted model."""
