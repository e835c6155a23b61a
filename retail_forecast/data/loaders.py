"""Reading sales tables from disk and grouping them into per-entity series."""

from typing import Dict, Optional, Any, List, Sequence
from dataclasses import dataclass, field
import pandas as pd
import logging
from pathlib import Path

from retail_forecast.data.structs import ObservationSeries

logger = logging.getLogger(__name__)

AGGREGATIONS = ("sum", "mean", "last")

# Schema dtype names grouped by what a column may hold
DTYPE_FAMILIES = {
    "integer": {"int", "int8", "int16", "int32", "int64"},
    "float": {"float", "float32", "float64", "number"},
    "datetime": {"datetime", "datetime64", "datetime64[ns]", "datetime64[us]", "datetime64[ms]", "datetime64[s]"},
    "text": {"object", "str", "string"},
    "bool": {"bool", "boolean"},
}


def _family(dtype: str) -> Optional[str]:
    name = dtype.lower().replace(" ", "")
    for family, names in DTYPE_FAMILIES.items():
        if name in names:
            return family
    return None


@dataclass
class ValidationResult:
    """Outcome of checking a sales table against a column -> dtype schema."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    schema_violations: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "schema_violations": dict(self.schema_violations),
        }


class DataLoader:
    """Loads sales tables and turns them into per-entity observation series."""

    def load_table(
        self,
        path: str,
        schema: Optional[Dict[str, str]] = None
    ) -> pd.DataFrame:
        """
        Read a sales table, optionally checking it against a schema.

        Args:
            path: .csv, .csv.gz or .parquet file
            schema: Expected {column: dtype}, e.g. {"Weekly_Sales": "float64"}

        Raises:
            FileNotFoundError: If the file is missing
            ValueError: On an unsupported suffix or a failed schema check
        """
        source = Path(path)
        if not source.exists():
            raise FileNotFoundError(f"Data file not found: {path}")

        if source.suffix == ".parquet":
            df = pd.read_parquet(source)
        elif source.suffixes[-1:] == [".csv"] or source.suffixes[-2:] == [".csv", ".gz"]:
            df = pd.read_csv(source, compression="infer")
        else:
            raise ValueError(f"Unsupported data format: {source.suffix}")

        logger.info(
            f"Loaded {len(df)} rows from {path}",
            extra={"props": {"path": str(path), "n_rows": len(df), "n_columns": df.shape[1]}},
        )

        if schema:
            check = self.validate_schema(df, schema)
            for warning in check.warnings:
                logger.warning(warning)
            if not check.is_valid:
                raise ValueError("Schema validation failed: " + "; ".join(check.errors))

        return df

    def validate_schema(
        self,
        df: pd.DataFrame,
        schema: Dict[str, str]
    ) -> ValidationResult:
        """
        Check column presence and dtypes. Columns not in the schema only warn.

        Ints satisfy a float column, and text satisfies a datetime column
        because CSV dates are parsed later by `to_series_collection`.
        """
        result = ValidationResult(is_valid=True)

        for column, expected in schema.items():
            if column not in df.columns:
                result.errors.append(f"Missing required column: {column}")
                result.schema_violations[column] = "missing"
                continue
            actual = str(df[column].dtype)
            if not self._dtype_compatible(actual, expected):
                result.errors.append(
                    f"Column '{column}' has dtype '{actual}', expected '{expected}'"
                )
                result.schema_violations[column] = f"dtype_mismatch: {actual} != {expected}"

        unexpected = sorted(set(df.columns) - set(schema))
        if unexpected:
            result.warnings.append(f"Extra columns found: {unexpected}")

        result.is_valid = not result.errors
        return result

    def _dtype_compatible(self, actual: str, expected: str) -> bool:
        if actual.lower().replace(" ", "") == expected.lower().replace(" ", ""):
            return True
        have, want = _family(actual), _family(expected)
        if have is None or want is None:
            return False
        accepted = {
            "float": {"float", "integer"},
            "datetime": {"datetime", "text"},
        }.get(want, {want})
        return have in accepted

    def to_series_collection(
        self,
        df: pd.DataFrame,
        time_column: str,
        value_column: str,
        key_columns: Optional[Sequence[str]] = None,
        agg: str = "sum",
        date_format: Optional[str] = None,
    ) -> List[ObservationSeries]:
        """
        Group rows per entity into strictly time-ordered series.

        Rows sharing a key and timestamp are aggregated with `agg`. An all-missing
        group stays missing; it is never turned into zero.

        Args:
            df: Long-format table
            time_column: Column with observation timestamps
            value_column: Column with the numeric target
            key_columns: Columns identifying an entity (e.g. ['Store', 'Dept'])
            agg: How duplicate timestamps are combined ('sum', 'mean', 'last')
            date_format: Optional strftime format for parsing the time column

        Returns:
            One ObservationSeries per key, ordered by key
        """
        key_columns = list(key_columns or [])
        missing = [c for c in [time_column, value_column, *key_columns] if c not in df.columns]
        if missing:
            raise ValueError(f"Missing required columns: {missing}")
        if agg not in AGGREGATIONS:
            raise ValueError(f"Unknown aggregation: {agg}. Supported: {list(AGGREGATIONS)}")

        frame = df[[*key_columns, time_column, value_column]].copy()
        frame[time_column] = pd.to_datetime(frame[time_column], format=date_format, errors="coerce")
        frame[value_column] = pd.to_numeric(frame[value_column], errors="coerce")

        bad_times = frame[time_column].isna()
        if bad_times.any():
            logger.warning(f"Dropping {int(bad_times.sum())} rows with unparseable timestamps")
            frame = frame[~bad_times]

        if key_columns:
            bad_keys = frame[key_columns].isna().any(axis=1)
            if bad_keys.any():
                logger.warning(f"Dropping {int(bad_keys.sum())} rows with missing key values")
                frame = frame[~bad_keys]

        grouped = frame.groupby([*key_columns, time_column], sort=True)[value_column]
        if agg == "sum":
            aggregated = grouped.sum(min_count=1)
        elif agg == "mean":
            aggregated = grouped.mean()
        else:
            aggregated = grouped.last()

        if not key_columns:
            return [ObservationSeries.from_series(aggregated, key=value_column)]

        levels = list(range(len(key_columns)))
        collection = []
        for key, group in aggregated.groupby(level=levels, sort=True):
            if isinstance(key, tuple) and len(key) == 1:
                key = key[0]
            collection.append(
                ObservationSeries.from_series(group.droplevel(levels), key=key)
            )

        logger.info(
            f"Built {len(collection)} series from {len(frame)} rows",
            extra={"props": {"n_series": len(collection), "n_rows": len(frame)}},
        )
        return collection
