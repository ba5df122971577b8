"""Tests for the deep analysis pass."""

import pytest

from kowalski.analysis.insights import (
    DeepInsight,
    InsightSeverity,
    InsightType,
    QualityIssueType,
    analyze_data_quality,
    answer_question,
    detect_anomalies,
    detect_row_anomalies,
    find_near_duplicates,
    find_segments,
    names_related,
    rank_insights,
    round_number_ratio,
    run_deep_analysis,
)
from kowalski.analysis.statistics import analyze_dataset
from kowalski.core.models.dataset import DataSet


@pytest.fixture
def messy_dataset() -> DataSet:
    return DataSet(
        name="messy",
        columns=["city", "amount"],
        rows=[
            ["Oslo", 10],
            ["oslo ", 20],
            ["Oslo", 10],
            ["Bergen", None],
            ["Bergen", 30],
        ],
    )


@pytest.fixture
def sales_deep(sales_dataset):
    return run_deep_analysis(sales_dataset, analyze_dataset(sales_dataset))


class TestDataQuality:
    def test_clean_sales_data(self, sales_dataset):
        report = analyze_data_quality(sales_dataset, analyze_dataset(sales_dataset))
        assert report.score == 100
        assert report.summary == "Excellent data quality - ready for analysis"
        assert [(i.type, i.column) for i in report.issues] == [
            (QualityIssueType.SUSPICIOUS, "revenue")
        ]
        assert report.issues[0].description == '100% of "revenue" values are round numbers'
        assert report.issues[0].affected_count == 10

    def test_deductions(self, messy_dataset):
        report = analyze_data_quality(messy_dataset, analyze_dataset(messy_dataset))

        # 20 for missing amounts, 5 for inconsistent cities, 15 for duplicates
        assert report.score == 60
        assert report.summary.startswith("Moderate data quality")
        assert [i.type for i in report.issues] == [
            QualityIssueType.INCONSISTENT,
            QualityIssueType.MISSING,
            QualityIssueType.SUSPICIOUS,
            QualityIssueType.DUPLICATE,
        ]
        inconsistent, missing, _, duplicate = report.issues
        assert inconsistent.description == (
            'Possible inconsistent values in "city": "Oslo" vs "oslo "'
        )
        assert missing.description == '20.0% missing values in "amount"'
        assert missing.severity == InsightSeverity.WARNING
        assert duplicate.column is None
        assert duplicate.severity == InsightSeverity.CRITICAL
        assert duplicate.description == "1 duplicate rows detected (20.0%)"

    def test_helpers(self):
        assert round_number_ratio([5, 10, 12, 15]) == 0.75
        assert round_number_ratio([]) == 0.0
        assert find_near_duplicates(["Yes", "yes", " YES", "No"]) == [
            ("Yes", "yes"),
            ("Yes", " YES"),
            ("yes", " YES"),
        ]


class TestDetectors:
    def test_names_related(self):
        assert names_related("unit_price", "unit_cost")
        assert names_related("price", "total_cost")
        assert names_related("start_date", "end_time")
        assert not names_related("a", "b")
        assert not names_related("id_a", "id_b")

    def test_row_anomalies(self):
        rows = [[i % 2, i % 2] for i in range(20)] + [[100, 100]]
        dataset = DataSet(name="spiky", columns=["x", "y"], rows=rows)
        analysis = analyze_dataset(dataset)

        assert detect_row_anomalies(dataset, analysis) == [20]
        insights = {i.id: i for i in detect_anomalies(dataset, analysis)}
        assert insights["anomaly-rows"].title == "1 anomalous rows detected"
        assert insights["anomaly-rows"].severity == InsightSeverity.INFO
        assert insights["anomaly-skew-x"].type == InsightType.ANOMALY

    def test_row_anomalies_need_two_columns(self, step_series):
        dataset = DataSet(name="one", columns=["v"], rows=[[v] for v in step_series])
        assert detect_row_anomalies(dataset, analyze_dataset(dataset)) == []

    def test_segments(self):
        rows = [["A", 10.0]] * 10 + [["B", 30.0]] * 10 + [["C", 20.0]] * 3
        dataset = DataSet(name="tiers", columns=["tier", "amount"], rows=rows)

        segments = find_segments(dataset, analyze_dataset(dataset))

        assert [s.name for s in segments] == ["tier: A", "tier: B"]
        assert segments[0].size == 10
        assert segments[0].description == '10 rows (43.5%) where tier = "A"'
        assert segments[1].characteristics[0].startswith("Higher amount (+")

    def test_small_groups_are_not_segments(self, sales_dataset):
        assert find_segments(sales_dataset, analyze_dataset(sales_dataset)) == []


class TestRunDeepAnalysis:
    def test_ranked_insights(self, sales_deep):
        assert [i.id for i in sales_deep.insights] == [
            "trend-units",
            "trend-revenue",
            "corr-strong-units-revenue",
            "quality-suspicious-revenue",
        ]
        correlation = sales_deep.insights[2]
        assert correlation.severity == InsightSeverity.SUCCESS
        assert correlation.title == 'Strong positive correlation: "units" ↔ "revenue"'
        assert sales_deep.segments == []
        assert sales_deep.data_quality.score == 100

    def test_story(self, sales_deep):
        story = sales_deep.story
        assert story.headline == 'Strong positive correlation: "units" ↔ "revenue"'
        assert story.summary == (
            "Dataset contains 10 rows and 3 columns. "
            "2 numeric and 1 categorical variables. Found 1 significant correlation."
        )
        assert story.key_findings[0] == '100% of "revenue" values are round numbers'
        assert story.surprises == ["No major surprises - data behaves as expected"]
        assert story.questions == [
            "What causes the relationship between units and revenue?",
            "What's driving the trend in units?",
            "What's driving the trend in revenue?",
        ]
        assert story.next_steps[-1] == "Ask follow-up questions about specific findings"

    def test_recommendations(self, sales_deep):
        assert [(r.priority, r.action) for r in sales_deep.recommendations] == [
            ("medium", "Investigate what's driving this significant change"),
            ("medium", "Investigate what's driving this significant change"),
            ("medium", "Investigate the units-revenue relationship"),
        ]

    def test_poor_quality_comes_first(self, messy_dataset):
        deep = run_deep_analysis(messy_dataset, analyze_dataset(messy_dataset))
        assert deep.recommendations[0].action == "Clean your data before analysis"
        assert deep.recommendations[0].reason == "Data quality score is 60/100"
        assert deep.insights[0].severity == InsightSeverity.CRITICAL
        assert deep.story.headline.startswith("Critical issues found:")

    def test_rank_order(self):
        def insight(id: str, severity: InsightSeverity, confidence: int) -> DeepInsight:
            return DeepInsight(
                id=id,
                type=InsightType.PATTERN,
                severity=severity,
                confidence=confidence,
                title=id,
                description=id,
            )

        ranked = rank_insights(
            [
                insight("info", InsightSeverity.INFO, 99),
                insight("success", InsightSeverity.SUCCESS, 50),
                insight("warning-low", InsightSeverity.WARNING, 60),
                insight("warning-high", InsightSeverity.WARNING, 80),
                insight("critical", InsightSeverity.CRITICAL, 10),
            ]
        )
        assert [i.id for i in ranked] == [
            "critical",
            "warning-high",
            "warning-low",
            "success",
            "info",
        ]


class TestAnswerQuestion:
    @pytest.fixture
    def ask(self, sales_dataset):
        analysis = analyze_dataset(sales_dataset)
        deep = run_deep_analysis(sales_dataset, analysis)
        return lambda question: answer_question(question, sales_dataset, analysis, deep)

    def test_correlations(self, ask):
        assert ask("What is the relationship between columns?") == (
            "The strongest correlations are:\n• units ↔ revenue: 1.000 (strong)"
        )

    def test_quality(self, ask):
        assert ask("What quality issues are there?") == (
            'Data quality issues found:\n• 100% of "revenue" values are round numbers'
        )

    def test_counts(self, ask):
        answer = ask("How many rows?")
        assert "• 10 rows" in answer
        assert "• 1 categorical columns" in answer

    def test_fallback(self, ask):
        answer = ask("Anything else?")
        assert answer.startswith("Found 4 insights in this data.")
