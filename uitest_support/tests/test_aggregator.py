"""Tests for run metrics aggregation."""

import dataclasses

import pytest

from uitest_support.core.exceptions import MisuseError
from uitest_support.reporting.aggregator import RunMetricsAggregator
from uitest_support.reporting.models import (
    FailureCategory,
    NamedDuration,
    RunConfig,
    TestOutcome,
    TestStatus,
)


@pytest.fixture
def aggregator(clock) -> RunMetricsAggregator:
    return RunMetricsAggregator(clock=clock)


@pytest.fixture
def run_config() -> RunConfig:
    return RunConfig(
        worker_count=3,
        projects=("b2c-desktop-chrome", "b2c-mobile-android"),
        engines=("chromium", "chromium", "webkit"),
    )


def run(aggregator, config, outcomes):
    aggregator.on_run_start(config)
    for outcome in outcomes:
        aggregator.on_test_end(outcome)
    return aggregator.on_run_end()


class TestLifecycle:
    """Tests for lifecycle ordering."""

    def test_test_end_before_start(self, aggregator):
        """Test on_test_end before on_run_start is misuse."""
        with pytest.raises(MisuseError) as exc_info:
            aggregator.on_test_end(TestOutcome("x", 1, TestStatus.PASSED))
        assert exc_info.value.operation == "on_test_end"

    def test_run_end_before_start(self, aggregator):
        """Test on_run_end before on_run_start is misuse."""
        with pytest.raises(MisuseError):
            aggregator.on_run_end()

    def test_double_start(self, aggregator, run_config):
        """Test on_run_start twice is misuse."""
        aggregator.on_run_start(run_config)
        with pytest.raises(MisuseError):
            aggregator.on_run_start(run_config)

    def test_double_end(self, aggregator, run_config):
        """Test on_run_end twice raises on the second call."""
        report = run(aggregator, run_config, [])
        assert aggregator.is_finished

        with pytest.raises(MisuseError) as exc_info:
            aggregator.on_run_end()
        assert exc_info.value.operation == "on_run_end"
        assert report.total_tests == 0

    def test_test_end_after_run_end(self, aggregator, run_config):
        """Test no outcomes are accepted after finalization."""
        run(aggregator, run_config, [])
        with pytest.raises(MisuseError):
            aggregator.on_test_end(TestOutcome("late", 1, TestStatus.PASSED))

    def test_context_from_config(self, aggregator, run_config, clock):
        """Test the run context captures config with distinct engines."""
        clock.advance(5.0)
        context = aggregator.on_run_start(run_config)

        assert context.worker_count == 3
        assert context.engines == ["chromium", "webkit"]
        assert context.projects == ["b2c-desktop-chrome", "b2c-mobile-android"]
        assert context.started_at == 5.0

    def test_dict_config(self, aggregator):
        """Test camelCase dict config is accepted."""
        context = aggregator.on_run_start(
            {"workerCount": 2, "projects": ["a"], "engines": ["firefox"]}
        )
        assert context.worker_count == 2
        assert context.engines == ["firefox"]


class TestRunReport:
    """Tests for the computed report."""

    def test_worked_example(self, aggregator, run_config):
        """Test the login/checkout two-test run."""
        report = run(
            aggregator,
            run_config,
            [
                TestOutcome("login flow", 120, TestStatus.PASSED),
                TestOutcome("checkout flow", 340, TestStatus.FAILED),
            ],
        )

        assert report.slowest_test == NamedDuration("checkout flow", 340)
        assert report.fastest_test == NamedDuration("login flow", 120)
        assert report.critical_path_coverage == 100
        assert report.feature_coverage == 0
        assert report.avg_test_duration == 230
        assert report.passed == 1
        assert report.failed == 1

    def test_zero_tests(self, aggregator, run_config):
        """Test a degenerate run has zero mean and coverage."""
        report = run(aggregator, run_config, [])

        assert report.total_tests == 0
        assert report.avg_test_duration == 0
        assert report.critical_path_coverage == 0
        assert report.slowest_test is None
        assert report.fastest_test is None
        assert report.pass_rate == 0

    def test_all_smoke(self, aggregator, run_config):
        """Test every smoke-named test gives full critical-path coverage."""
        outcomes = [
            TestOutcome(f"smoke check {i}", 100 + i, TestStatus.PASSED) for i in range(7)
        ]
        report = run(aggregator, run_config, outcomes)
        assert report.critical_path_coverage == 100

    def test_counts_sum_to_total(self, aggregator, run_config, outcome_records):
        """Test status counters partition the outcomes."""
        report = run(aggregator, run_config, outcome_records)

        assert report.total_tests == len(outcome_records)
        assert report.passed + report.failed + report.skipped + report.flaky == report.total_tests
        assert (report.passed, report.failed, report.skipped, report.flaky) == (2, 1, 1, 1)

    def test_stability_counters(self, aggregator, run_config, outcome_records):
        """Test timeouts and retry totals."""
        report = run(aggregator, run_config, outcome_records)

        assert report.timeouts == 1
        assert report.retries == 3

    def test_timeout_only_counted_for_failures(self, aggregator, run_config):
        """Test a timeout message on a non-failed test is ignored."""
        report = run(
            aggregator,
            run_config,
            [
                TestOutcome("slow", 10, TestStatus.FLAKY, error_message="Timeout exceeded"),
                TestOutcome("hung", 10, TestStatus.FAILED, error_message="Navigation timed out"),
                TestOutcome("tagged", 10, TestStatus.FAILED, failure_category="timeout"),
                TestOutcome("assert", 10, TestStatus.FAILED, error_message="expected 2 got 3"),
            ],
        )
        assert report.timeouts == 2

    def test_framework_errors(self, aggregator, run_config):
        """Test framework-tagged failures are counted."""
        report = run(
            aggregator,
            run_config,
            [
                TestOutcome("a", 1, TestStatus.FAILED, failure_category=FailureCategory.FRAMEWORK),
                TestOutcome("b", 1, TestStatus.FAILED, failure_category=FailureCategory.ASSERTION),
            ],
        )
        assert report.framework_errors == 1

    def test_extremes_keep_first_seen_on_ties(self, aggregator, run_config):
        """Test equal durations keep the earliest record."""
        report = run(
            aggregator,
            run_config,
            [
                TestOutcome("first", 200, TestStatus.PASSED),
                TestOutcome("second", 200, TestStatus.PASSED),
            ],
        )
        assert report.slowest_test.name == "first"
        assert report.fastest_test.name == "first"

    def test_coverage(self, aggregator, run_config, outcome_records):
        """Test feature and cross-platform coverage."""
        report = run(aggregator, run_config, outcome_records)

        assert report.feature_tags == ("account", "mobile", "navigation", "search")
        assert report.feature_coverage == 4
        # navigation smoke + checkout of 5
        assert report.critical_path_coverage == 40
        assert report.cross_platform_coverage == 2

    def test_execution_time(self, aggregator, run_config, clock):
        """Test execution time is measured from run start."""
        aggregator.on_run_start(run_config)
        clock.advance(12.5)
        report = aggregator.on_run_end()
        assert report.execution_time == 12.5

    def test_report_is_frozen(self, aggregator, run_config):
        """Test the report cannot be mutated."""
        report = run(aggregator, run_config, [])
        with pytest.raises(dataclasses.FrozenInstanceError):
            report.passed = 10

    def test_outcomes_preserved_in_order(self, aggregator, run_config, outcome_records):
        """Test outcomes are appended in arrival order."""
        run(aggregator, run_config, outcome_records)
        assert [o.name for o in aggregator.outcomes] == [r["name"] for r in outcome_records]

    def test_custom_markers(self, clock, run_config):
        """Test marker lists can be replaced."""
        aggregator = RunMetricsAggregator(
            feature_markers=["cart"], critical_markers=["payment"], clock=clock
        )
        report = run(
            aggregator,
            run_config,
            [
                TestOutcome("cart totals", 1, TestStatus.PASSED),
                TestOutcome("payment declined", 1, TestStatus.PASSED),
            ],
        )
        assert report.feature_tags == ("cart",)
        assert report.critical_path_coverage == 50

    def test_empty_markers_are_respected(self, clock, run_config):
        """Test explicit empty marker lists disable the heuristics."""
        aggregator = RunMetricsAggregator(feature_markers=[], critical_markers=[], clock=clock)
        report = run(
            aggregator,
            run_config,
            [TestOutcome("smoke navigation", 1, TestStatus.PASSED)],
        )
        assert report.feature_coverage == 0
        assert report.critical_path_coverage == 0

    def test_test_details(self, aggregator, run_config, outcome_records):
        """Test every outcome gets a classified detail, in arrival order."""
        report = run(aggregator, run_config, outcome_records)

        assert [d.name for d in report.test_details] == [r["name"] for r in outcome_records]
        first = report.test_details[0]
        assert (first.feature, first.criticality, first.platform) == (
            "Navigation",
            "Critical",
            "Cross-Platform",
        )
        assert report.test_details[3].platform == "Mobile"
        assert report.test_details[3].status is TestStatus.SKIPPED

    def test_defect_analysis_covers_failures(self, aggregator, run_config, outcome_records):
        """Test only failed tests are triaged."""
        report = run(aggregator, run_config, outcome_records)

        assert len(report.defect_analysis) == report.failed == 1
        defect = report.defect_analysis[0]
        assert defect.test_name == "checkout as guest"
        assert defect.issue_type == "Functional"
        assert defect.is_real_issue


class TestReportDict:
    """Tests for RunReport.to_dict."""

    def test_dashboard_layout(self, aggregator, run_config, outcome_records):
        """Test the dashboard metrics keys and nesting."""
        data = run(aggregator, run_config, outcome_records).to_dict()

        assert data["totalTests"] == 5
        assert data["parallelWorkers"] == 3
        assert data["browsers"] == ["chromium", "webkit"]
        assert data["performance"]["slowestTest"] == {
            "name": "checkout as guest",
            "duration": 30000,
        }
        assert data["performance"]["fastestTest"]["name"] == "mobile account menu"
        assert data["coverage"] == {"features": 4, "criticalPaths": 40, "crossPlatform": 2}
        assert data["stability"] == {"frameworkErrors": 0, "timeouts": 1, "retries": 3}

    def test_empty_run_extremes(self, aggregator, run_config):
        """Test empty runs serialize placeholder extremes."""
        data = run(aggregator, run_config, []).to_dict()
        assert data["performance"]["slowestTest"] == {"name": "", "duration": 0}
        assert data["performance"]["avgTestDuration"] == 0

    def test_details_and_defects_layout(self, aggregator, run_config, outcome_records):
        """Test per-test details and defect analysis are emitted."""
        data = run(aggregator, run_config, outcome_records).to_dict()

        assert len(data["testDetails"]) == 5
        assert data["testDetails"][1] == {
            "name": "search for drills",
            "status": "passed",
            "duration": 1500,
            "feature": "Search",
            "criticality": "Low",
            "platform": "Cross-Platform",
        }
        assert [d["testName"] for d in data["defectAnalysis"]] == ["checkout as guest"]
        assert data["defectAnalysis"][0]["riskLevel"] == "Medium"

    def test_empty_run_details(self, aggregator, run_config):
        """Test empty runs emit empty detail lists."""
        data = run(aggregator, run_config, []).to_dict()
        assert data["testDetails"] == []
        assert data["defectAnalysis"] == []
