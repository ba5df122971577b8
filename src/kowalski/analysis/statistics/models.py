"""Statistical profile models.

Pydantic models for the statistics engine output:
- NumericColumnStats / CategoricalColumnStats: per-column profile
- DataSummary: dataset-level counts
- Correlation, Association, Trend, Outlier: findings
- AnalysisResult: everything ``analyze_dataset`` produces
- EDAReport: narrative report built by ``generate_eda_report``
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field


class Percentiles(BaseModel):
    """Quartile positions of a numeric column."""

    p25: float = 0.0
    p50: float = 0.0
    p75: float = 0.0


class DescriptiveStats(BaseModel):
    """Output of ``calculate_stats``; all zeros for empty input."""

    count: int = 0
    mean: float = 0.0
    median: float = 0.0
    min: float = 0.0
    max: float = 0.0
    std: float = 0.0  # population standard deviation
    sum: float = 0.0
    percentiles: Percentiles = Field(default_factory=Percentiles)


class ValueCount(BaseModel):
    """A value with its count."""

    value: str
    count: int


class CategoricalStats(BaseModel):
    """Output of ``calculate_categorical_stats``."""

    count: int  # includes nulls
    null_count: int
    unique_count: int
    top_values: list[ValueCount] = Field(default_factory=list)


class NumericColumnStats(BaseModel):
    """Profile of a column tagged as number."""

    type: Literal["numeric"] = "numeric"
    count: int
    null_count: int
    mean: float
    median: float
    min: float
    max: float
    std: float
    q1: float
    q3: float
    percentiles: Percentiles
    skewness: float = 0.0  # Fisher-Pearson, biased


class CategoricalColumnStats(BaseModel):
    """Profile of a string or date column."""

    type: Literal["categorical"] = "categorical"
    count: int
    null_count: int
    unique_count: int
    top_values: list[ValueCount] = Field(default_factory=list)


ColumnStats = Annotated[NumericColumnStats | CategoricalColumnStats, Field(discriminator="type")]

CorrelationStrength = Literal["strong", "moderate", "weak", "none"]
TrendDirection = Literal["up", "down", "stable"]


class DataSummary(BaseModel):
    """Dataset-level counts."""

    total_rows: int
    total_columns: int
    numeric_columns: int = 0
    categorical_columns: int = 0
    missing_percent: float = 0.0  # fraction of null cells, 0-1
    duplicate_rows: int = 0
    null_counts: dict[str, int] = Field(default_factory=dict)
    unique_counts: dict[str, int] = Field(default_factory=dict)


class Correlation(BaseModel):
    """Pearson correlation between two numeric columns."""

    column1: str
    column2: str
    value: float
    strength: CorrelationStrength


AssociationMethod = Literal["cramers_v", "point_biserial"]


class Association(BaseModel):
    """Association involving at least one categorical column.

    Cramér's V for two categorical columns, point-biserial for a numeric
    column (``column1``) against a categorical one (``column2``).
    """

    column1: str
    column2: str
    value: float
    method: AssociationMethod
    strength: CorrelationStrength


class Trend(BaseModel):
    """Direction of a numeric column over row order."""

    column: str
    direction: TrendDirection
    change_percent: float
    description: str


class Outlier(BaseModel):
    """A value outside the IQR fence of its column."""

    column: str
    row_index: int
    value: float
    expected_min: float
    expected_max: float
    zscore: float = 0.0


class AnalysisResult(BaseModel):
    """Full output of one statistics pass over a dataset."""

    summary: DataSummary
    statistics: dict[str, ColumnStats] = Field(default_factory=dict)
    correlations: list[Correlation] = Field(default_factory=list)
    associations: list[Association] = Field(default_factory=list)
    trends: list[Trend] = Field(default_factory=list)
    outliers: list[Outlier] = Field(default_factory=list)


# === EDA report ===

FindingCategory = Literal["quality", "pattern", "anomaly", "finding", "warning"]
FindingSeverity = Literal["info", "success", "warning", "critical"]


class ReportFinding(BaseModel):
    """One headline finding of an EDA report."""

    category: FindingCategory
    title: str
    description: str
    severity: FindingSeverity
    evidence: list[str] = Field(default_factory=list)


class VariableSummary(BaseModel):
    """One line of the per-variable section."""

    name: str
    type: Literal["numeric", "categorical"]
    unique_count: int
    description: str
    notable: str | None = None


class ReportOverview(BaseModel):
    rows: int
    columns: int
    numeric_columns: int
    categorical_columns: int
    suspiciously_clean: bool = False


class EDAReport(BaseModel):
    """Narrative summary of a statistics pass, including a synthetic-data verdict."""

    overview: ReportOverview
    variables: list[VariableSummary] = Field(default_factory=list)
    findings: list[ReportFinding] = Field(default_factory=list)
    interpretation: str
    bottom_line: str
    is_synthetic: bool = False
    synthetic_reasons: list[str] = Field(default_factory=list)
