"""Tests for the DataSet model and its pandas adapters."""

import math

import pandas as pd
import pytest
from pydantic import ValidationError

from kowalski.core.exceptions import DataSetError, KowalskiError
from kowalski.core.models.base import ColumnType
from kowalski.core.models.dataset import DataSet, infer_column_type, is_number


class TestDataSetValidation:
    """Structural checks at construction time."""

    def test_ragged_row_rejected(self):
        """A row with the wrong number of cells fails validation."""
        with pytest.raises(ValidationError, match="row 1 has 1 cells"):
            DataSet(name="bad", columns=["a", "b"], rows=[[1, 2], [3]])

    def test_types_length_must_match(self):
        with pytest.raises(ValidationError):
            DataSet(name="bad", columns=["a"], rows=[[1]], types=["number", "string"])

    def test_boolean_cells_rejected(self):
        """Booleans are not valid cells."""
        with pytest.raises(ValidationError):
            DataSet(name="bad", columns=["flag"], rows=[[True]])

    def test_empty_dataset_is_valid(self):
        dataset = DataSet(name="empty", columns=[])
        assert dataset.row_count == 0
        assert dataset.column_types == []


class TestColumnTypes:
    """Effective column type tags."""

    def test_declared_types_win(self):
        dataset = DataSet(name="d", columns=["a"], rows=[["1"]], types=["number"])
        assert dataset.column_types == [ColumnType.NUMBER]

    def test_inferred_when_absent(self):
        dataset = DataSet(
            name="d",
            columns=["n", "d", "s"],
            rows=[[1, "2024-01-01", "x"], [2.5, "2024-01-02", "y"], [None, None, None]],
        )
        assert dataset.column_types == [ColumnType.NUMBER, ColumnType.DATE, ColumnType.STRING]

    def test_all_null_column_is_string(self):
        assert infer_column_type([None, None]) == ColumnType.STRING

    def test_numeric_strings_stay_strings(self):
        assert infer_column_type(["1", "2", "3"]) == ColumnType.STRING

    def test_is_number(self):
        assert is_number(3)
        assert is_number(2.5)
        assert not is_number(True)
        assert not is_number(math.nan)
        assert not is_number("3")
        assert not is_number(None)


class TestColumnAccess:
    def test_column_values_and_numbers(self):
        dataset = DataSet(name="d", columns=["a"], rows=[[1], [None], ["x"], [2.5]])
        assert dataset.column_values(0) == [1, None, "x", 2.5]
        assert dataset.numeric_column_values(0) == [1, 2.5]

    def test_column_index(self):
        dataset = DataSet(name="d", columns=["a", "b"])
        assert dataset.column_index("b") == 1
        assert dataset.column_index("missing") is None

    def test_with_rows_keeps_schema(self):
        dataset = DataSet(name="d", columns=["a"], rows=[[1], [2]], types=["number"])
        smaller = dataset.with_rows([[1]])
        assert smaller.name == "d"
        assert smaller.types == [ColumnType.NUMBER]
        assert smaller.row_count == 1
        assert dataset.row_count == 2


class TestFrameAdapters:
    """Conversion to and from pandas."""

    def test_from_frame_converts_missing_values(self):
        df = pd.DataFrame({"amount": [1.5, None, 3.0], "label": ["a", None, "c"]})
        dataset = DataSet.from_frame(df, name="frame")

        assert dataset.name == "frame"
        assert dataset.columns == ["amount", "label"]
        assert dataset.types == [ColumnType.NUMBER, ColumnType.STRING]
        assert dataset.rows[1] == [None, None]
        assert dataset.rows[0] == [1.5, "a"]

    def test_from_frame_integers_stay_integers(self):
        dataset = DataSet.from_frame(pd.DataFrame({"n": [1, 2]}))
        assert dataset.rows == [[1], [2]]
        assert all(type(row[0]) is int for row in dataset.rows)

    def test_from_frame_dates_become_iso_strings(self):
        df = pd.DataFrame({"day": pd.to_datetime(["2024-01-01", "2024-01-02"])})
        dataset = DataSet.from_frame(df)
        assert dataset.types == [ColumnType.DATE]
        assert dataset.rows[0][0].startswith("2024-01-01")

    def test_from_frame_booleans_become_strings(self):
        dataset = DataSet.from_frame(pd.DataFrame({"flag": [True, False]}))
        assert dataset.rows == [["true"], ["false"]]

    def test_duplicate_columns_rejected(self):
        df = pd.DataFrame([[1, 2]], columns=["a", "a"])
        with pytest.raises(DataSetError):
            DataSet.from_frame(df)

    def test_dataset_error_is_kowalski_error(self):
        assert issubclass(DataSetError, KowalskiError)

    def test_to_frame(self):
        dataset = DataSet(name="d", columns=["a", "b"], rows=[[1, "x"], [2, None]])
        df = dataset.to_frame()
        assert list(df.columns) == ["a", "b"]
        assert df.shape == (2, 2)
        assert df["a"].tolist() == [1, 2]
