"""Unit tests for DataLoader."""

import logging

import pytest
import numpy as np
import pandas as pd

from retail_forecast.data.loaders import DataLoader


@pytest.fixture
def loader():
    return DataLoader()


class TestLoadTable:
    """Tests for reading sales tables from disk."""

    def test_load_csv(self, loader, sales_frame, tmp_path):
        path = tmp_path / "sales.csv"
        sales_frame.to_csv(path, index=False)
        df = loader.load_table(str(path))
        assert len(df) == len(sales_frame)
        assert list(df.columns) == ["Store", "Dept", "Date", "Weekly_Sales"]

    def test_load_gzipped_csv(self, loader, sales_frame, tmp_path):
        path = tmp_path / "sales.csv.gz"
        sales_frame.to_csv(path, index=False)
        assert len(loader.load_table(str(path))) == len(sales_frame)

    def test_load_parquet(self, loader, sales_frame, tmp_path):
        path = tmp_path / "sales.parquet"
        sales_frame.to_parquet(path)
        assert len(loader.load_table(str(path))) == len(sales_frame)

    def test_missing_file(self, loader, tmp_path):
        with pytest.raises(FileNotFoundError):
            loader.load_table(str(tmp_path / "nope.csv"))

    def test_unsupported_format(self, loader, tmp_path):
        path = tmp_path / "sales.xlsx"
        path.write_text("x")
        with pytest.raises(ValueError, match="Unsupported"):
            loader.load_table(str(path))

    def test_schema_validation(self, loader, sales_frame, tmp_path):
        """CSV dates (strings) satisfy a datetime schema; ints satisfy float."""
        path = tmp_path / "sales.csv"
        sales_frame.to_csv(path, index=False)
        schema = {"Store": "int64", "Dept": "int64", "Date": "datetime64[ns]", "Weekly_Sales": "float64"}
        assert len(loader.load_table(str(path), schema=schema)) == len(sales_frame)

    def test_schema_missing_column(self, loader, sales_frame, tmp_path):
        path = tmp_path / "sales.csv"
        sales_frame.to_csv(path, index=False)
        with pytest.raises(ValueError, match="Missing required column: IsHoliday"):
            loader.load_table(str(path), schema={"IsHoliday": "bool"})

    def test_validate_schema_reports_violations(self, loader):
        df = pd.DataFrame({"Store": ["a", "b"], "Extra": [1, 2]})
        result = loader.validate_schema(df, {"Store": "int64", "Date": "datetime64[ns]"})
        assert not result.is_valid
        assert result.schema_violations["Date"] == "missing"
        assert result.schema_violations["Store"].startswith("dtype_mismatch")
        assert result.warnings == ["Extra columns found: ['Extra']"]


class TestSeriesCollection:
    """Tests for grouping a long table into per-entity series."""

    def test_one_series_per_key(self, loader, sales_frame):
        collection = loader.to_series_collection(
            sales_frame, "Date", "Weekly_Sales", key_columns=["Store", "Dept"]
        )
        assert [s.key for s in collection] == [(1, 1), (1, 2), (2, 1), (2, 2), (3, 1)]
        assert [len(s) for s in collection] == [80, 80, 80, 80, 5]
        assert all(s.timestamps.is_monotonic_increasing for s in collection)

    def test_single_key_column_is_unwrapped(self, loader, sales_frame):
        collection = loader.to_series_collection(sales_frame, "Date", "Weekly_Sales", key_columns=["Store"])
        assert [s.key for s in collection] == [1, 2, 3]
        # Stores 1 and 2 have two departments summed per week
        assert len(collection[0]) == 80

    def test_no_key_columns(self, loader, sales_frame):
        collection = loader.to_series_collection(sales_frame, "Date", "Weekly_Sales")
        assert len(collection) == 1
        assert collection[0].key == "Weekly_Sales"

    def test_unordered_duplicates_are_aggregated(self, loader):
        df = pd.DataFrame({
            "Date": ["2010-02-12", "2010-02-05", "2010-02-12"],
            "Sales": [1.0, 2.0, 3.0],
        })
        summed = loader.to_series_collection(df, "Date", "Sales", agg="sum")[0]
        assert list(summed.values) == [2.0, 4.0]
        averaged = loader.to_series_collection(df, "Date", "Sales", agg="mean")[0]
        assert list(averaged.values) == [2.0, 2.0]

    def test_all_missing_group_stays_missing(self, loader):
        df = pd.DataFrame({
            "Date": ["2010-02-05", "2010-02-05", "2010-02-12"],
            "Sales": [np.nan, np.nan, 5.0],
        })
        series = loader.to_series_collection(df, "Date", "Sales")[0]
        assert np.isnan(series.values[0])
        assert series.values[1] == 5.0

    def test_unparseable_dates_dropped(self, loader):
        df = pd.DataFrame({"Date": ["2010-02-05", "not a date"], "Sales": [1.0, 2.0]})
        series = loader.to_series_collection(df, "Date", "Sales")[0]
        assert len(series) == 1

    def test_rows_with_missing_key_dropped(self, loader, caplog):
        df = pd.DataFrame({
            "Store": [1, np.nan, 1],
            "Date": ["2010-02-05", "2010-02-05", "2010-02-12"],
            "Sales": [1.0, 5.0, 2.0],
        })
        with caplog.at_level(logging.WARNING):
            collection = loader.to_series_collection(df, "Date", "Sales", key_columns=["Store"])
        assert len(collection) == 1
        assert collection[0].key == 1
        assert list(collection[0].values) == [1.0, 2.0]
        assert "Dropping 1 rows with missing key values" in caplog.text

    def test_missing_columns(self, loader, sales_frame):
        with pytest.raises(ValueError, match="Missing required columns"):
            loader.to_series_collection(sales_frame, "Date", "Revenue")

    def test_unknown_aggregation(self, loader, sales_frame):
        with pytest.raises(ValueError, match="Unknown aggregation"):
            loader.to_series_collection(sales_frame, "Date", "Weekly_Sales", agg="median")
