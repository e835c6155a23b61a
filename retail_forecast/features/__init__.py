"""Feature engineering for sales forecasting.

Provides lag-1 and trailing rolling-mean features, either as a lazy row
sequence or as a vectorised DataFrame for model training.
"""

from retail_forecast.features.engineering import (
    FeatureBuilder,
    FeatureRow,
    FeatureSequence,
)

__all__ = [
    "FeatureBuilder",
    "FeatureRow",
    "FeatureSequence",
]
