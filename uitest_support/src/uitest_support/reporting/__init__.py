"""Test-run telemetry: lifecycle aggregation and report persistence."""

from uitest_support.reporting.aggregator import RunMetricsAggregator
from uitest_support.reporting.classification import defect_report, detail_for
from uitest_support.reporting.coverage import (
    CRITICAL_MARKERS,
    FEATURE_MARKERS,
    critical_path_percentage,
    feature_tags,
)
from uitest_support.reporting.models import (
    DefectAnalysis,
    FailureCategory,
    NamedDuration,
    RunConfig,
    RunContext,
    RunReport,
    TestDetail,
    TestOutcome,
    TestStatus,
)
from uitest_support.reporting.storage import ReportWriter

__all__ = [
    # Aggregation
    "RunMetricsAggregator",
    # Models
    "RunConfig",
    "RunContext",
    "TestOutcome",
    "TestStatus",
    "FailureCategory",
    "NamedDuration",
    "RunReport",
    "TestDetail",
    "DefectAnalysis",
    # Heuristics
    "FEATURE_MARKERS",
    "CRITICAL_MARKERS",
    "feature_tags",
    "critical_path_percentage",
    "detail_for",
    "defect_report",
    # Persistence
    "ReportWriter",
]
