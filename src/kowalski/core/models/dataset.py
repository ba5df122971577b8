"""The tabular dataset every analysis consumes.

A dataset is a name, an ordered list of column names and a list of rows.
Cells are tagged by their Python type: ``str``, ``int``/``float`` or
``None``. Booleans are not valid cells; a parser upstream decides whether
"yes"/"no" become strings or numbers.
"""

from __future__ import annotations

import math
import re
from functools import cached_property
from typing import TYPE_CHECKING, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    model_validator,
)

from kowalski.core.exceptions import DataSetError
from kowalski.core.models.base import ColumnType

if TYPE_CHECKING:
    import pandas as pd

Cell = StrictStr | StrictInt | StrictFloat | None

# Loader-level date shapes used when a dataset arrives without type tags
_LOADER_DATE_PATTERNS = (
    re.compile(r"^\d{4}-\d{2}-\d{2}"),
    re.compile(r"^\d{2}/\d{2}/\d{4}"),
    re.compile(r"^\d{2}-\d{2}-\d{4}"),
    re.compile(r"^\w{3}\s+\d{1,2},?\s+\d{4}"),
)


def is_number(value: Any) -> bool:
    """True for int/float cells that carry a usable number (bool and NaN excluded)."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def _looks_like_date(value: str) -> bool:
    return any(p.match(value) for p in _LOADER_DATE_PATTERNS)


def infer_column_type(values: list[Any]) -> ColumnType:
    """Tag a column the way the loader does: >80% numbers, else >80% dates, else string."""
    numbers = dates = total = 0
    for value in values:
        if value is None:
            continue
        total += 1
        if is_number(value):
            numbers += 1
        elif isinstance(value, str) and _looks_like_date(value):
            dates += 1

    if total == 0:
        return ColumnType.STRING
    if numbers / total > 0.8:
        return ColumnType.NUMBER
    if dates / total > 0.8:
        return ColumnType.DATE
    return ColumnType.STRING


class DataSet(BaseModel):
    """An in-memory table.

    Rows must all have exactly one cell per column; a ragged dataset fails
    validation at construction time.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    columns: list[str]
    rows: list[list[Cell]] = Field(default_factory=list)
    types: list[ColumnType] | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> DataSet:
        width = len(self.columns)
        for i, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(f"row {i} has {len(row)} cells, expected {width}")
        if self.types is not None and len(self.types) != width:
            raise ValueError(f"types has {len(self.types)} entries, expected {width}")
        return self

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @cached_property
    def column_types(self) -> list[ColumnType]:
        """Effective type tag per column, inferred when none were declared."""
        if self.types is not None:
            return list(self.types)
        return [infer_column_type(self.column_values(i)) for i in range(len(self.columns))]

    def column_index(self, name: str) -> int | None:
        try:
            return self.columns.index(name)
        except ValueError:
            return None

    def column_values(self, index: int) -> list[Any]:
        """All cells of one column, nulls included."""
        return [row[index] for row in self.rows]

    def numeric_column_values(self, index: int) -> list[float]:
        """The usable numbers of one column, in row order."""
        return [row[index] for row in self.rows if is_number(row[index])]

    def with_rows(self, rows: list[list[Any]]) -> DataSet:
        """A copy of this dataset holding a different set of rows."""
        return DataSet(name=self.name, columns=self.columns, rows=rows, types=self.types)

    @classmethod
    def from_frame(cls, df: pd.DataFrame, name: str = "dataset") -> DataSet:
        """Build a dataset from a pandas DataFrame.

        Numeric dtypes become number columns, datetimes become ISO date
        strings, everything else is stringified. Missing values become None.
        """
        import pandas as pd

        columns = [str(c) for c in df.columns]
        if len(set(columns)) != len(columns):
            raise DataSetError(f"duplicate column names in frame for dataset '{name}'")

        types: list[ColumnType] = []
        converted: list[list[Any]] = []
        for column in df.columns:
            series = df[column]
            if pd.api.types.is_bool_dtype(series):
                types.append(ColumnType.STRING)
                converted.append([None if pd.isna(v) else str(bool(v)).lower() for v in series])
            elif pd.api.types.is_numeric_dtype(series):
                types.append(ColumnType.NUMBER)
                converted.append([None if pd.isna(v) else _to_number(v) for v in series])
            elif pd.api.types.is_datetime64_any_dtype(series):
                types.append(ColumnType.DATE)
                converted.append([None if pd.isna(v) else v.isoformat() for v in series])
            else:
                types.append(ColumnType.STRING)
                converted.append([None if _is_missing(v) else _to_cell(v) for v in series])

        rows = [list(cells) for cells in zip(*converted, strict=True)]
        return cls(name=name, columns=columns, rows=rows, types=types)

    def to_frame(self) -> pd.DataFrame:
        """Convert to a pandas DataFrame (None cells become missing values)."""
        import pandas as pd

        return pd.DataFrame(self.rows, columns=self.columns)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def _to_number(value: Any) -> int | float:
    number = value.item() if hasattr(value, "item") else value
    if isinstance(number, int) and not isinstance(number, bool):
        return number
    return float(number)


def _to_cell(value: Any) -> Any:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int | float | str):
        return value
    return str(value)
