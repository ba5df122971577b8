"""Descriptive statistics, outliers and the dataset-level statistics pass."""

from kowalski.analysis.statistics.descriptive import (
    calculate_categorical_stats,
    calculate_stats,
    value_label,
)
from kowalski.analysis.statistics.models import (
    AnalysisResult,
    Association,
    CategoricalColumnStats,
    CategoricalStats,
    ColumnStats,
    Correlation,
    DataSummary,
    DescriptiveStats,
    EDAReport,
    NumericColumnStats,
    Outlier,
    Percentiles,
    ReportFinding,
    ReportOverview,
    Trend,
    ValueCount,
    VariableSummary,
)
from kowalski.analysis.statistics.outliers import (
    ZScoreOutliers,
    calculate_zscore,
    detect_outliers_zscore,
    find_iqr_outliers,
    iqr_fence,
)
from kowalski.analysis.statistics.processor import analyze_dataset, count_duplicate_rows
from kowalski.analysis.statistics.insights import generate_insights
from kowalski.analysis.statistics.report import (
    detect_synthetic_data,
    format_eda_report,
    generate_eda_report,
    summarize_variable,
)

__all__ = [
    "AnalysisResult",
    "Association",
    "CategoricalColumnStats",
    "CategoricalStats",
    "ColumnStats",
    "Correlation",
    "DataSummary",
    "DescriptiveStats",
    "EDAReport",
    "NumericColumnStats",
    "Outlier",
    "Percentiles",
    "ReportFinding",
    "ReportOverview",
    "Trend",
    "ValueCount",
    "VariableSummary",
    "ZScoreOutliers",
    "analyze_dataset",
    "calculate_categorical_stats",
    "calculate_stats",
    "calculate_zscore",
    "count_duplicate_rows",
    "detect_outliers_zscore",
    "detect_synthetic_data",
    "find_iqr_outliers",
    "format_eda_report",
    "generate_eda_report",
    "generate_insights",
    "iqr_fence",
    "summarize_variable",
    "value_label",
]
