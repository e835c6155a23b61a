"""
Serialization utilities for evaluation outputs.
Handles JSON (with timestamp and numpy support), CSV and Parquet.
"""

import json
import math
import logging
from pathlib import Path
from typing import Any, Union
from datetime import datetime
import pandas as pd
import numpy as np

logger = logging.getLogger(__name__)


class DateTimeEncoder(json.JSONEncoder):
    """JSON encoder that handles datetime and numpy types."""
    def default(self, obj):
        if isinstance(obj, (datetime, pd.Timestamp)):
            return obj.isoformat()
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, tuple):
            return list(obj)
        return super().default(obj)


def _non_finite_to_none(data: Any) -> Any:
    """Replace NaN and infinite floats with None so the output is strict JSON."""
    if isinstance(data, dict):
        return {k: _non_finite_to_none(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [_non_finite_to_none(v) for v in data]
    if isinstance(data, (float, np.floating)) and not math.isfinite(data):
        return None
    return data


def save_json(data: Any, path: Union[str, Path], **kwargs) -> None:
    """Save data to JSON with datetime support. NaN and inf are written as null."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(_non_finite_to_none(data), f, cls=DateTimeEncoder, indent=2, allow_nan=False, **kwargs)
    logger.debug(f"Saved JSON to {path}")


def load_json(path: Union[str, Path]) -> Any:
    """Load data from JSON."""
    with open(path, 'r') as f:
        return json.load(f)


def save_frame(df: pd.DataFrame, path: Union[str, Path], **kwargs) -> None:
    """Save DataFrame to CSV or Parquet depending on the file suffix."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix == ".parquet":
        df.to_parquet(path, **kwargs)
    elif path.suffix == ".csv":
        df.to_csv(path, **kwargs)
    else:
        raise ValueError(f"Unsupported output format: {path.suffix}")
    logger.debug(f"Saved {len(df)} rows to {path}")
